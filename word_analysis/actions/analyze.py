# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Word usage analysis action.

This action runs the analysis service for one or more words over the episode
corpus and writes one report file per word into the output directory (or
prints the reports to stdout).
"""

import argparse
import asyncio
from dataclasses import dataclass

from word_analysis.actions.base import require_config
from word_analysis.config import ConfigError, WordAnalysisConfig
from word_analysis.corpus import DirectoryEpisodeSource
from word_analysis.engine.models import Report
from word_analysis.report_files import REPORT_FORMATS, render_report, save_report
from word_analysis.service import AnalysisService, normalize_term


@dataclass(frozen=True)
class AnalyzeAction:
    """
    `analyze` subcommand.

    Counts each word per episode and speaker and collects example snippets.
    """

    name: str = "analyze"
    help: str = "Count word usage across the episode corpus"
    requires_config: bool = True

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """
        Register CLI arguments for the `analyze` subcommand.

        Args:
            parser:
                Subparser for this command.
        """

        parser.add_argument("words", nargs="+", metavar="WORD", help="Word(s) or phrase(s) to analyze")
        parser.add_argument(
            "--format",
            choices=REPORT_FORMATS,
            default="json",
            help="Report file format (default: json)",
        )
        parser.add_argument(
            "--stdout",
            action="store_true",
            help="Print the reports instead of writing files",
        )

    def run(self, args: argparse.Namespace, config: WordAnalysisConfig | None) -> None:
        """
        Execute the analysis.

        Args:
            args:
                Parsed args for the subcommand.
            config:
                Loaded configuration.

        Raises:
            InvalidQueryError:
                If one of the words is blank.
            ConfigError:
                If the corpus directory does not exist.
        """

        config = require_config(config, "AnalyzeAction")

        # Reject blank words before any episode is read.
        terms = [normalize_term(w) for w in args.words]

        if not config.corpus_dir.is_dir():
            raise ConfigError(f"Corpus directory not found: {config.corpus_dir}")

        print(f"Reading episodes from: {config.corpus_dir}")
        source = DirectoryEpisodeSource(config.corpus_dir)
        service = AnalysisService(source, config.engine, config.service)

        reports = asyncio.run(self._analyze_all(service, terms))

        for report in reports:
            self._print_summary(report)

            if args.stdout:
                print(render_report(report, args.format), end="")
                continue

            path = save_report(report, config.outdir, args.format)
            print(f"Wrote report: {path}")

    async def _analyze_all(self, service: AnalysisService, terms: list[str]) -> list[Report]:
        return list(await asyncio.gather(*(service.analyze(t) for t in terms)))

    def _print_summary(self, report: Report) -> None:
        if report.error:
            print(f'"{report.word}": analysis failed: {report.error}')
            return

        print(
            f'"{report.word}": {report.total_count} occurrence(s) in '
            f"{len(report.episodes)} episode(s), {len(report.contexts)} snippet(s)"
        )
        for speaker, count in sorted(report.speakers.items(), key=lambda kv: (-kv[1], kv[0])):
            print(f"  - {speaker}: {count}")
