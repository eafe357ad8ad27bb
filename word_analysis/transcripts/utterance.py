# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Speaker tag extraction.

Cue text carries the speaker as a bracketed label, e.g. `[Максим] text...`.
Cues without such a label (sound effects, narration) yield no utterance and
are ignored by the analysis.
"""

import re
from typing import Sequence

from word_analysis.transcripts.base import Cue, Utterance


# The label must open the cue; leading whitespace is tolerated.
_SPEAKER_RE = re.compile(r"\s*\[([^\]]+)\](.*)", re.DOTALL)


def extract_utterance(text: str) -> Utterance | None:
    """Split cue text into speaker label and spoken content.

    Args:
        text:
            Raw cue text.

    Returns:
        The utterance, or None if the text has no speaker label.
    """

    match = _SPEAKER_RE.match(text)
    if match is None:
        return None

    return Utterance(speaker=match.group(1).strip(), speech=match.group(2).strip())


def extract_utterances(cues: Sequence[Cue]) -> list[Utterance | None]:
    """Extract utterances for all cues, keeping cue indexes aligned."""

    return [extract_utterance(cue.text) for cue in cues]
