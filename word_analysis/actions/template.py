# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Template configuration generator.

This action writes a ready-to-edit `word-analysis.yaml` file into the current
directory (or a user-specified path).
"""

import argparse
from dataclasses import dataclass
from pathlib import Path

from word_analysis.cli_io import may_overwrite
from word_analysis.config import WordAnalysisConfig


TEMPLATE_YAML: str = "\n".join(
    [
        "# Directory with one folder (or file pair) per episode:",
        "#   episodes/2024-07-24/2024-07-24.srt   transcript with [Speaker] tags",
        "#   episodes/2024-07-24/2024-07-24.json  video metadata (thumbnails.medium.url)",
        "corpus: ./episodes",
        "",
        "# Where reports are written (analyze) and read from (write-output)",
        "outdir: ./reports",
        "",
        "# Spreadsheet export",
        "outfile: word-analysis.ods",
        "",
        "# Only these speaker labels are counted",
        "speakers:",
        "  - Максим",
        "  - Олександра",
        "  - Аліна",
        "",
        "# Counting options (optional; defaults shown)",
        "# counting:",
        "#   # Count overlapping matches (\"aa\" occurs twice in \"aaa\").",
        "#   overlapping: true",
        "",
        "# Snippet options (optional; defaults shown)",
        "# context:",
        "#   max_extension_cues: 4      # same-speaker cues added around a match",
        "#   max_time_gap: 15           # seconds",
        "#   extend_short_only: false   # only extend speech shorter than min_context_length",
        "#   min_context_length: 30",
        "#   conversational: true       # add nearby turns of other speakers",
        "#   dialogue_time_gap: 10",
        "#   max_exchanges: 2",
        "#   inline_threshold: 100      # longer conversation goes into a separate block",
        "#   min_words: 5               # words required besides the term",
        "#   min_length: 10",
        "#   validate_own_speech: false # also check the speaker's text without the conversation",
        "",
        "# Duplicate suppression (optional; defaults shown)",
        "# dedup:",
        "#   enabled: true",
        "#   time_signature: true       # one snippet per second",
        "#   similarity_ceiling: 0.8    # threshold = min(ceiling, length_factor / len + floor)",
        "#   similarity_floor: 0.6",
        "#   length_factor: 20",
        "#   max_episode_contexts: 20",
        "",
        "# report:",
        "#   max_contexts: 20",
        "",
        "# service:",
        "#   timeout_seconds: 15",
        "#   cache_ttl_seconds: 3600",
        "#   max_concurrency: 4",
        "",
        "# logging:",
        "#   level: INFO",
        "",
    ]
)


@dataclass(frozen=True)
class TemplateAction:
    """
    `template` subcommand.

    This action does not require a YAML config because it produces one.
    """

    name: str = "template"
    help: str = "Write a template word-analysis.yaml config"
    requires_config: bool = False

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "path",
            nargs="?",
            default="word-analysis.yaml",
            help="Destination path for the template (default: ./word-analysis.yaml)",
        )
        parser.add_argument(
            "-f",
            "--force",
            action="store_true",
            help="Allow overwriting an existing file",
        )

    def run(self, args: argparse.Namespace, config: WordAnalysisConfig | None) -> None:
        """
        Write the template.

        Raises:
            ConfigError:
                If the destination exists, `--force` is not set and there
                is no terminal to ask.
        """

        _ = config
        dest = Path(args.path)
        if not may_overwrite(dest, force=args.force):
            print(f"Keeping existing file: {dest}")
            return

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(TEMPLATE_YAML, encoding="utf-8")
        print(f"Wrote template config to: {dest}")
