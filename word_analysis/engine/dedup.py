# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Near-duplicate suppression for context snippets.

Closely spaced matches extend into the same neighboring cues, so naive
snippet building produces many near-identical texts. Three layers filter them:

1. Time signature: one snippet per rounded second and episode.
2. Similarity: Jaccard similarity of unique tokens against the snippets
   accepted so far, with a length-adjusted threshold.
3. Final selection: the first snippet of each speaker is kept, remaining
   slots are filled in time order with snippets that are still dissimilar to
   everything kept.
"""

import math
from typing import Iterable, Sequence

from word_analysis.config import DedupSettings
from word_analysis.engine.models import MatchContext


# ASCII punctuation plus typographic quotes and dashes common in transcripts.
_TOKEN_PUNCTUATION = "!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~«»“”„‘’…–—"


def tokenize(text: str) -> set[str]:
    """Return the unique, lower-cased whitespace tokens of a text.

    Surrounding punctuation is stripped so that `word.` and `word!` compare
    equal.
    """

    tokens = (tok.strip(_TOKEN_PUNCTUATION).lower() for tok in text.split())
    return {tok for tok in tokens if tok}


def jaccard_similarity(first: str, second: str) -> float:
    """Ratio of shared unique tokens to all unique tokens of two texts."""

    a = tokenize(first)
    b = tokenize(second)
    if not a and not b:
        return 1.0

    return len(a & b) / len(a | b)


def time_signature(seconds: float) -> int:
    """Round a timestamp to the nearest second (halves round up)."""

    return math.floor(seconds + 0.5)


class ContextDeduplicator:
    """
    Per-episode duplicate filter.

    One instance is used for one episode: `offer()` candidates in cue order,
    then call `select()` on `accepted`.
    """

    def __init__(self, settings: DedupSettings) -> None:
        self._settings = settings
        self._signatures: set[int] = set()
        self._accepted: list[MatchContext] = []

    @property
    def accepted(self) -> list[MatchContext]:
        return list(self._accepted)

    def threshold(self, text: str) -> float:
        """Similarity above which `text` counts as a duplicate."""

        s = self._settings
        if not text:
            return s.similarity_ceiling
        return min(s.similarity_ceiling, s.length_factor / len(text) + s.similarity_floor)

    def is_duplicate(self, text: str, kept: Iterable[MatchContext]) -> bool:
        """Return True if `text` is too similar to any kept snippet."""

        if not self._settings.enabled:
            return False

        limit = self.threshold(text)
        return any(jaccard_similarity(text, other.text) > limit for other in kept)

    def has_signature(self, seconds: float) -> bool:
        """Return True if a snippet was already accepted for this second."""

        if not (self._settings.enabled and self._settings.time_signature):
            return False
        return time_signature(seconds) in self._signatures

    def wants(self, speaker: str) -> bool:
        """
        Return True while a new snippet by `speaker` could still be selected.

        Once the pool holds `max_episode_contexts` snippets, only speakers
        without any snippet yet are of interest.
        """

        if len(self._accepted) < self._settings.max_episode_contexts:
            return True
        return self._settings.enabled and all(c.speaker != speaker for c in self._accepted)

    def offer(self, context: MatchContext) -> bool:
        """
        Run a candidate through the time-signature and similarity gates.

        Returns:
            True if the candidate was accepted.
        """

        if self.has_signature(context.time):
            return False
        if self.is_duplicate(context.text, self._accepted):
            return False

        self._signatures.add(time_signature(context.time))
        self._accepted.append(context)
        return True

    def select(self, contexts: Sequence[MatchContext]) -> list[MatchContext]:
        """
        Choose the final snippets of an episode.

        Snippets are ranked by time. The first snippet of every speaker is kept,
        then the remaining slots are filled with snippets that pass the
        similarity gate against the kept set. Applying `select` to its own
        output returns the same list.

        Args:
            contexts:
                Candidate snippets of one episode.

        Returns:
            At most `max_episode_contexts` snippets ordered by time.
        """

        limit = self._settings.max_episode_contexts
        ranked = sorted(contexts, key=lambda c: c.time)

        if not self._settings.enabled:
            return ranked[:limit]

        kept: list[MatchContext] = []
        kept_ids: set[int] = set()
        seen_speakers: set[str] = set()

        for idx, ctx in enumerate(ranked):
            if len(kept) >= limit:
                break
            if ctx.speaker in seen_speakers:
                continue
            seen_speakers.add(ctx.speaker)
            kept.append(ctx)
            kept_ids.add(idx)

        for idx, ctx in enumerate(ranked):
            if len(kept) >= limit:
                break
            if idx in kept_ids:
                continue
            if self.is_duplicate(ctx.text, kept):
                continue
            kept.append(ctx)
            kept_ids.add(idx)

        return sorted(kept, key=lambda c: c.time)
