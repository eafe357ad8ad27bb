# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Transcript data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Cue:
    """
    One timed block of transcript text.

    Attributes:
        start:
            Start offset in seconds.
        end:
            End offset in seconds.
        text:
            Raw cue text. Multi-line cues keep their line breaks.
    """

    start: float
    end: float
    text: str


@dataclass(frozen=True)
class Utterance:
    """
    Speaker-attributed content of a cue.

    Attributes:
        speaker:
            Speaker label taken from the leading `[Label]` tag.
        speech:
            Spoken text after the tag, trimmed.
    """

    speaker: str
    speech: str
