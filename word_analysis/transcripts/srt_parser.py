# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""SRT transcript parser.

Rules:
- Cues are separated by a blank line.
- Each cue has a sequence number line, a `HH:MM:SS,mmm --> HH:MM:SS,mmm`
  timing line and one or more text lines.
- Blocks with fewer than three lines or without a valid timing line are
  skipped. They are not treated as errors.

The parser only performs raw parsing. Text lines are kept verbatim.
"""

import re

from word_analysis.transcripts.base import Cue


_BLOCK_SEPARATOR_RE = re.compile(r"\r?\n\r?\n")
_LINE_SEPARATOR_RE = re.compile(r"\r?\n")

_TIMING_RE = re.compile(
    r"(\d{2}):(\d{2}):(\d{2}),(\d{3}) --> (\d{2}):(\d{2}):(\d{2}),(\d{3})"
)


def timestamp_to_seconds(hours: int, minutes: int, seconds: int, milliseconds: int) -> float:
    """Convert timestamp components into seconds."""

    return hours * 3600 + minutes * 60 + seconds + milliseconds / 1000


def parse_srt(content: str) -> list[Cue]:
    """Parse SRT content into cues.

    Args:
        content:
            Raw SRT text.

    Returns:
        Cues in file order. Malformed blocks are left out.
    """

    cues: list[Cue] = []

    text = content.lstrip("\ufeff").strip()
    if not text:
        return cues

    for block in _BLOCK_SEPARATOR_RE.split(text):
        lines = _LINE_SEPARATOR_RE.split(block)
        if len(lines) < 3:
            continue

        match = _TIMING_RE.search(lines[1])
        if match is None:
            continue

        parts = [int(g) for g in match.groups()]
        cues.append(
            Cue(
                start=timestamp_to_seconds(*parts[:4]),
                end=timestamp_to_seconds(*parts[4:]),
                text="\n".join(lines[2:]),
            )
        )

    return cues
