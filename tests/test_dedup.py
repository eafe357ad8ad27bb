"""Tests for duplicate suppression of snippets."""

from __future__ import annotations

import pytest

from word_analysis.config import DedupSettings
from word_analysis.engine.dedup import ContextDeduplicator, jaccard_similarity, time_signature, tokenize
from word_analysis.engine.models import MatchContext


def _ctx(time: float, text: str, speaker: str = "Максим") -> MatchContext:
    return MatchContext(episode="2024-07-24", time=time, speaker=speaker, text=text)


class TestSimilarity:
    def test_tokenize_strips_punctuation_and_case(self):
        assert tokenize("Hello, world! hello «world»") == {"hello", "world"}

    def test_jaccard(self):
        assert jaccard_similarity("a b", "b a") == 1.0
        assert jaccard_similarity("a b", "c d") == 0.0
        assert jaccard_similarity("a b c d", "a b") == 0.5

    def test_jaccard_of_empty_texts(self):
        assert jaccard_similarity("", "") == 1.0
        assert jaccard_similarity("", "a") == 0.0

    @pytest.mark.parametrize("seconds, expected", [(1.4, 1), (1.5, 2), (2.49, 2), (0.0, 0)])
    def test_time_signature(self, seconds, expected):
        assert time_signature(seconds) == expected


class TestThreshold:
    def test_short_text_uses_ceiling(self):
        dedup = ContextDeduplicator(DedupSettings())
        assert dedup.threshold("x" * 10) == pytest.approx(0.8)

    def test_long_text_is_stricter(self):
        dedup = ContextDeduplicator(DedupSettings())
        assert dedup.threshold("x" * 200) == pytest.approx(0.7)


class TestOffer:
    def test_near_identical_texts(self):
        dedup = ContextDeduplicator(DedupSettings())
        assert dedup.offer(_ctx(0.0, "Я думаю, що потік даних дуже важливий сьогодні."))
        assert not dedup.offer(_ctx(30.0, "Я думаю, що потік даних дуже важливий сьогодні!"))
        assert len(dedup.accepted) == 1

    def test_same_second(self):
        dedup = ContextDeduplicator(DedupSettings())
        assert dedup.offer(_ctx(10.2, "Перший фрагмент тексту про потік"))
        assert dedup.has_signature(10.4)
        assert not dedup.offer(_ctx(10.4, "Зовсім інші слова тут"))

    def test_distinct_texts_accepted(self):
        dedup = ContextDeduplicator(DedupSettings())
        assert dedup.offer(_ctx(0.0, "Перший фрагмент тексту про потік"))
        assert dedup.offer(_ctx(20.0, "Зовсім інші слова тут"))

    def test_disabled(self):
        dedup = ContextDeduplicator(DedupSettings(enabled=False))
        assert dedup.offer(_ctx(0.0, "Same text here"))
        assert dedup.offer(_ctx(0.1, "Same text here"))
        assert not dedup.has_signature(0.0)

    def test_wants_new_speakers_once_full(self):
        dedup = ContextDeduplicator(DedupSettings(max_episode_contexts=1))
        dedup.offer(_ctx(0.0, "Перший фрагмент тексту про потік"))
        assert not dedup.wants("Максим")
        assert dedup.wants("Аліна")


class TestSelect:
    def _candidates(self) -> list[MatchContext]:
        return [
            _ctx(20.0, "charlie delta echo foxtrot"),
            _ctx(0.0, "alpha bravo charlie delta"),
            _ctx(10.0, "golf hotel india juliet"),
            _ctx(30.0, "kilo lima mike november", speaker="Аліна"),
        ]

    def test_every_speaker_first(self):
        dedup = ContextDeduplicator(DedupSettings(max_episode_contexts=2))
        selected = dedup.select(self._candidates())
        assert [(c.speaker, c.time) for c in selected] == [("Максим", 0.0), ("Аліна", 30.0)]

    def test_fills_in_time_order(self):
        dedup = ContextDeduplicator(DedupSettings(max_episode_contexts=3))
        selected = dedup.select(self._candidates())
        assert [c.time for c in selected] == [0.0, 10.0, 30.0]

    def test_skips_similar_when_filling(self):
        dedup = ContextDeduplicator(DedupSettings())
        candidates = [_ctx(0.0, "alpha bravo charlie delta"), _ctx(5.0, "alpha bravo charlie delta!")]
        assert [c.time for c in dedup.select(candidates)] == [0.0]

    def test_idempotent(self):
        dedup = ContextDeduplicator(DedupSettings(max_episode_contexts=3))
        once = dedup.select(self._candidates())
        assert dedup.select(once) == once

    def test_disabled_only_caps(self):
        dedup = ContextDeduplicator(DedupSettings(enabled=False, max_episode_contexts=2))
        assert [c.time for c in dedup.select(self._candidates())] == [0.0, 10.0]
