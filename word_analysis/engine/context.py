# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Context snippet construction.

A single subtitle cue is usually too short to show how a term was used. The
builder therefore:
- extends the matched speech with neighboring cues of the same speaker,
- optionally adds nearby turns of other speakers as conversational context,
- normalizes whitespace, punctuation spacing and sentence capitalization,
- rejects snippets that contain little besides the term itself.
"""

import math
import re
from typing import Sequence

from word_analysis.config import ContextSettings
from word_analysis.transcripts.base import Cue, Utterance


_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_START_RE = re.compile(r"(^|[.!?]\s+)([^\W\d_])")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,?!;:])")
_VIDEO_ID_RE = re.compile(r"/vi/([^/]+)/")

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}&t={seconds}"


def sanitize_context(text: str) -> str:
    """
    Normalize snippet text for display.

    Collapses whitespace, capitalizes the first letter of each sentence and
    removes spaces in front of punctuation marks.
    """

    if not text:
        return ""

    sanitized = _WHITESPACE_RE.sub(" ", text).strip()
    sanitized = _SENTENCE_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), sanitized)
    return _SPACE_BEFORE_PUNCT_RE.sub(r"\1", sanitized)


def is_valid_context(text: str, term: str, *, min_words: int, min_length: int) -> bool:
    """
    Check whether a snippet is meaningful.

    Args:
        text:
            Candidate snippet.
        term:
            Query term.
        min_words:
            Words that must remain once every occurrence of the term is removed.
        min_length:
            Minimum snippet length in characters.

    Returns:
        True if the snippet is long enough and not just the term itself.
    """

    if not text or len(text) < min_length:
        return False

    remainder = re.sub(re.escape(term), "", text.lower(), flags=re.IGNORECASE) if term else text
    return len(remainder.split()) >= min_words


def extract_video_id(thumbnail_url: str) -> str | None:
    """Return the video id embedded as `/vi/<id>/` in a thumbnail URL."""

    match = _VIDEO_ID_RE.search(thumbnail_url or "")
    return match.group(1) if match else None


def build_youtube_link(video_id: str | None, seconds: float) -> str | None:
    """Build a timestamped watch link, or None without a video id."""

    if not video_id:
        return None
    return YOUTUBE_WATCH_URL.format(video_id=video_id, seconds=math.floor(seconds))


class ContextBuilder:
    """
    Build snippets for matches inside one episode.

    Args:
        cues:
            The episode's cues in order.
        utterances:
            Utterances aligned with `cues` (None for cues without speaker).
        valid_speakers:
            Speakers eligible for conversational context.
        settings:
            Snippet settings.
    """

    def __init__(
        self,
        cues: Sequence[Cue],
        utterances: Sequence[Utterance | None],
        *,
        valid_speakers: frozenset[str],
        settings: ContextSettings,
    ) -> None:
        if len(cues) != len(utterances):
            raise ValueError("cues and utterances must have the same length")

        self._cues = cues
        self._utterances = utterances
        self._valid_speakers = valid_speakers
        self._settings = settings

    def build(self, index: int, term: str) -> str | None:
        """
        Build the snippet for the cue at `index`.

        Returns:
            The snippet, or None if it fails the validity check.
        """

        utterance = self._utterances[index]
        if utterance is None:
            return None

        if self._settings.extend_short_only and len(utterance.speech) >= self._settings.min_context_length:
            text = sanitize_context(utterance.speech)
        else:
            text = self.extend(index)

        if self._settings.validate_own_speech and not self._is_valid(text, term):
            return None

        if self._settings.conversational:
            text = self.combine(text, self.conversation(index))

        return text if self._is_valid(text, term) else None

    def extend(self, index: int) -> str:
        """
        Extend the matched speech with nearby cues of the same speaker.

        Forward cues qualify while they start within `max_time_gap` of the
        matched cue's start; backward cues while they end within `max_time_gap`
        before it. Both directions share the `max_extension_cues` budget.
        """

        utterance = self._utterances[index]
        if utterance is None:
            return ""

        current = self._cues[index]
        budget = self._settings.max_extension_cues
        gap = self._settings.max_time_gap

        parts = [utterance.speech]
        added = 0

        j = index + 1
        while j < len(self._cues) and added < budget and self._cues[j].start <= current.start + gap:
            other = self._utterances[j]
            if other is not None and other.speaker == utterance.speaker:
                parts.append(other.speech)
                added += 1
            j += 1

        j = index - 1
        while j >= 0 and added < budget and current.start - self._cues[j].end <= gap:
            other = self._utterances[j]
            if other is not None and other.speaker == utterance.speaker:
                parts.insert(0, other.speech)
                added += 1
            j -= 1

        return sanitize_context(" ".join(parts))

    def conversation(self, index: int) -> str:
        """
        Collect nearby turns of other valid speakers as `[Name]: speech` lines.

        Up to `max_exchanges` turns are taken in each direction within
        `dialogue_time_gap`; the result is in chronological order.
        """

        utterance = self._utterances[index]
        if utterance is None:
            return ""

        current = self._cues[index]
        limit = self._settings.max_exchanges
        gap = self._settings.dialogue_time_gap

        before: list[str] = []
        j = index - 1
        while j >= 0 and len(before) < limit and current.start - self._cues[j].end <= gap:
            if self._is_other_speaker(j, utterance.speaker):
                before.insert(0, self._format_turn(j))
            j -= 1

        after: list[str] = []
        j = index + 1
        while j < len(self._cues) and len(after) < limit and self._cues[j].start <= current.start + gap:
            if self._is_other_speaker(j, utterance.speaker):
                after.append(self._format_turn(j))
            j += 1

        return " ".join(before + after)

    def combine(self, main: str, conversation: str) -> str:
        """Attach conversational context inline (short) or as a labeled block (long)."""

        if not conversation:
            return main

        if len(conversation) < self._settings.inline_threshold:
            return f"{main} (Context: {conversation})"

        return f"{main}\n\nConversational context:\n{conversation}"

    def _is_valid(self, text: str, term: str) -> bool:
        return is_valid_context(
            text,
            term,
            min_words=self._settings.min_words,
            min_length=self._settings.min_length,
        )

    def _is_other_speaker(self, index: int, speaker: str) -> bool:
        other = self._utterances[index]
        return other is not None and other.speaker != speaker and other.speaker in self._valid_speakers

    def _format_turn(self, index: int) -> str:
        other = self._utterances[index]
        assert other is not None
        return f"[{other.speaker}]: {other.speech}"
