"""Tests for snippet construction."""

from __future__ import annotations

import pytest

from word_analysis.config import ContextSettings
from word_analysis.engine.context import (
    ContextBuilder,
    build_youtube_link,
    extract_video_id,
    is_valid_context,
    sanitize_context,
)
from word_analysis.transcripts import extract_utterances, parse_srt


SPEAKERS = frozenset({"Максим", "Олександра", "Аліна"})


def _builder(srt_text: str, **overrides) -> ContextBuilder:
    cues = parse_srt(srt_text)
    return ContextBuilder(
        cues,
        extract_utterances(cues),
        valid_speakers=SPEAKERS,
        settings=ContextSettings(**overrides),
    )


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

class TestSanitizeContext:
    def test_whitespace_capitalization_punctuation(self):
        assert sanitize_context("  hello   world .  this is  it ! ok") == "Hello world. This is it! Ok"

    def test_cyrillic_sentences(self):
        assert sanitize_context("привіт. як справи ?") == "Привіт. Як справи?"

    def test_empty(self):
        assert sanitize_context("") == ""


class TestIsValidContext:
    def test_term_only(self):
        assert not is_valid_context("потік потік потік", "потік", min_words=5, min_length=10)

    def test_too_short(self):
        assert not is_valid_context("a b c", "x", min_words=1, min_length=10)

    def test_enough_other_words(self):
        text = "Я думаю що потік даних дуже важливий"
        assert is_valid_context(text, "потік", min_words=5, min_length=10)

    def test_term_removed_case_insensitively(self):
        assert not is_valid_context("ПОТІК один два три", "потік", min_words=4, min_length=10)


class TestYoutubeLink:
    def test_video_id_from_thumbnail(self):
        assert extract_video_id("https://i.ytimg.com/vi/abc123/mqdefault.jpg") == "abc123"

    def test_thumbnail_without_video_id(self):
        assert extract_video_id("https://example.com/thumb.jpg") is None
        assert extract_video_id("") is None

    def test_link_floors_seconds(self):
        assert build_youtube_link("abc123", 75.9) == "https://www.youtube.com/watch?v=abc123&t=75"

    def test_no_link_without_id(self):
        assert build_youtube_link(None, 12.0) is None


# ---------------------------------------------------------------------------
# ContextBuilder
# ---------------------------------------------------------------------------

class TestExtend:
    def test_short_cue_extends_into_next(self, srt):
        builder = _builder(
            srt(
                [
                    (0, 2, "[Максим] Ну, потік."),
                    (3, 5, "[Максим] це те, про що ми сьогодні говоримо з гостями."),
                ]
            )
        )
        text = builder.build(0, "потік")
        assert text == "Ну, потік. Це те, про що ми сьогодні говоримо з гостями."

    def test_extension_budget(self, srt):
        builder = _builder(
            srt(
                [
                    (0, 1, "[Максим] потік alpha"),
                    (1, 2, "[Максим] bravo"),
                    (2, 3, "[Максим] charlie"),
                    (3, 4, "[Максим] delta"),
                ]
            ),
            max_extension_cues=2,
        )
        assert builder.extend(0) == "Потік alpha bravo charlie"

    def test_other_speakers_are_skipped(self, srt):
        builder = _builder(
            srt(
                [
                    (0, 1, "[Максим] потік alpha"),
                    (1, 2, "[Аліна] bravo"),
                    (2, 3, "[Максим] charlie"),
                ]
            )
        )
        assert builder.extend(0) == "Потік alpha charlie"

    def test_time_gaps(self, srt):
        builder = _builder(
            srt(
                [
                    (0, 1, "[Максим] early words"),
                    (30, 32, "[Максим] middle words"),
                    (40, 42, "[Максим] потік end"),
                    (60, 62, "[Максим] late words"),
                ]
            )
        )
        assert builder.extend(2) == "Middle words потік end"

    def test_extend_short_only_keeps_long_speech(self, srt):
        builder = _builder(
            srt(
                [
                    (0, 2, "[Максим] потік даних сьогодні дуже важлива тема"),
                    (3, 5, "[Максим] and more words"),
                ]
            ),
            extend_short_only=True,
        )
        assert builder.build(0, "потік") == "Потік даних сьогодні дуже важлива тема"

    def test_mismatched_inputs(self, srt):
        cues = parse_srt(srt([(0, 1, "[Максим] a")]))
        with pytest.raises(ValueError):
            ContextBuilder(cues, [], valid_speakers=SPEAKERS, settings=ContextSettings())


DIALOGUE = [
    (0, 2, "[Аліна] Що ти думаєш?"),
    (3, 5, "[Максим] Я думаю, що потік даних тут головне питання."),
    (6, 8, "[Олександра] Цілком згодна."),
    (9, 10, "[Гість] Я теж."),
]


class TestConversation:
    def test_inline_context(self, srt):
        builder = _builder(srt(DIALOGUE))
        text = builder.build(1, "потік")
        assert text is not None
        assert text.startswith("Я думаю, що потік даних тут головне питання.")
        assert text.endswith("(Context: [Аліна]: Що ти думаєш? [Олександра]: Цілком згодна.)")
        assert "Гість" not in text

    def test_disabled(self, srt):
        builder = _builder(srt(DIALOGUE), conversational=False)
        assert builder.build(1, "потік") == "Я думаю, що потік даних тут головне питання."

    def test_exchange_limit(self, srt):
        builder = _builder(
            srt(
                [
                    (0, 1, "[Аліна] one"),
                    (1, 2, "[Олександра] two"),
                    (2, 3, "[Максим] потік"),
                ]
            ),
            max_exchanges=1,
        )
        assert builder.conversation(2) == "[Олександра]: two"

    def test_long_conversation_as_block(self, srt):
        builder = _builder(srt(DIALOGUE))
        long_turns = "[Аліна]: " + "слово " * 30
        text = builder.combine("Main text", long_turns)
        assert text == f"Main text\n\nConversational context:\n{long_turns}"


SHORT_REPLY = [
    (0, 2, "[Аліна] Що ти думаєш про цю нову тему сьогодні?"),
    (3, 4, "[Максим] Потік!"),
    (5, 8, "[Олександра] Так, саме про це ми й говорили вчора ввечері."),
]


class TestValidity:
    def test_short_reply_validated_with_conversation(self, srt):
        text = _builder(srt(SHORT_REPLY)).build(1, "потік")
        assert text is not None
        assert text.startswith("Потік!")
        assert "[Аліна]: Що ти думаєш про цю нову тему сьогодні?" in text
        assert "[Олександра]: Так, саме про це ми й говорили вчора ввечері." in text

    def test_short_reply_without_conversation(self, srt):
        assert _builder(srt(SHORT_REPLY), conversational=False).build(1, "потік") is None

    def test_validate_own_speech(self, srt):
        assert _builder(srt(SHORT_REPLY), validate_own_speech=True).build(1, "потік") is None

    def test_bare_term_without_neighbors(self, srt):
        assert _builder(srt([(0, 1, "[Максим] потік")])).build(0, "потік") is None
