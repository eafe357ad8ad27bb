"""Transcript parsing.

Transcripts are SRT subtitle files. Parsing yields an ordered list of `Cue`
records (`start`, `end`, `text`). Speaker attribution is a separate step that
turns cue text of the form `[Speaker] speech` into an `Utterance`.
"""

from word_analysis.transcripts.base import Cue, Utterance
from word_analysis.transcripts.srt_parser import parse_srt
from word_analysis.transcripts.utterance import extract_utterance, extract_utterances

__all__ = [
    "Cue",
    "Utterance",
    "extract_utterance",
    "extract_utterances",
    "parse_srt",
]
