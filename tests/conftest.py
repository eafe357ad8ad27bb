"""Shared fixtures: SRT builders, episode metadata and default settings."""

from __future__ import annotations

import logging

import pytest

from word_analysis.config import EngineSettings


THUMBNAIL = "https://i.ytimg.com/vi/abc123/mqdefault.jpg"


def srt_timestamp(seconds: float) -> str:
    millis = int(round(seconds * 1000))
    hours, rest = divmod(millis, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def make_srt(cues: list[tuple[float, float, str]]) -> str:
    """Render (start, end, text) triples as SRT text."""

    blocks = [
        f"{idx}\n{srt_timestamp(start)} --> {srt_timestamp(end)}\n{text}"
        for idx, (start, end, text) in enumerate(cues, start=1)
    ]
    return "\n\n".join(blocks) + "\n"


@pytest.fixture
def srt():
    return make_srt


@pytest.fixture
def metadata() -> dict:
    return {"thumbnails": {"medium": {"url": THUMBNAIL}}}


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """The CLI reconfigures the root logger; undo that after each test."""

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
