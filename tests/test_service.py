"""Tests for the analysis service boundary."""

from __future__ import annotations

import asyncio
import time

import pytest

from word_analysis.config import EngineSettings, ServiceSettings
from word_analysis.corpus import EpisodeUnavailableError, MemoryEpisodeSource
from word_analysis.engine.models import EpisodeData, Report
from word_analysis.service import AnalysisService, InvalidQueryError, ReportCache, normalize_term


class RecordingSource:
    """Memory source that counts calls and can be slowed down or broken."""

    def __init__(self, inner: MemoryEpisodeSource, *, delay: float = 0.0, fail_listing: bool = False) -> None:
        self.inner = inner
        self.delay = delay
        self.fail_listing = fail_listing
        self.listings = 0
        self.loads = 0

    def episode_dates(self) -> list[str]:
        self.listings += 1
        if self.fail_listing:
            raise RuntimeError("storage offline")
        return self.inner.episode_dates()

    def load_episode(self, date: str) -> EpisodeData:
        self.loads += 1
        if self.delay:
            time.sleep(self.delay)
        return self.inner.load_episode(date)


@pytest.fixture
def corpus(srt, metadata) -> MemoryEpisodeSource:
    return MemoryEpisodeSource(
        {
            "2024-02-01": srt([(0, 3, "[Аліна] Я думаю, що потік даних дуже важливий сьогодні.")]),
            "2024-01-01": srt([(0, 3, "[Максим] Це тестовий потік даних")]),
        },
        {"2024-02-01": metadata, "2024-01-01": metadata},
    )


class TestNormalizeTerm:
    def test_trims_and_lowercases(self):
        assert normalize_term("  ПОТІК ") == "потік"

    @pytest.mark.parametrize("raw", ["", "   ", None, 42])
    def test_rejects_blank(self, raw):
        with pytest.raises(InvalidQueryError):
            normalize_term(raw)


class TestReportCache:
    def test_expires_after_ttl(self):
        now = [100.0]
        cache = ReportCache(10, clock=lambda: now[0])
        report = Report(word="потік")
        cache.put("потік", report)
        now[0] = 109.9
        assert cache.get("потік") is report
        now[0] = 110.0
        assert cache.get("потік") is None
        assert len(cache) == 0

    def test_put_drops_expired_entries(self):
        now = [0.0]
        cache = ReportCache(10, clock=lambda: now[0])
        cache.put("потік", Report(word="потік"))
        now[0] = 20.0
        cache.put("дані", Report(word="дані"))
        assert list(cache._entries) == ["дані"]

    def test_disabled(self):
        cache = ReportCache(0)
        cache.put("потік", Report(word="потік"))
        assert cache.get("потік") is None


class TestAnalysisService:
    def test_blank_term_does_no_work(self, corpus):
        source = RecordingSource(corpus)
        service = AnalysisService(source, EngineSettings())
        with pytest.raises(InvalidQueryError):
            asyncio.run(service.analyze("   "))
        assert source.listings == 0

    def test_report(self, corpus):
        service = AnalysisService(corpus, EngineSettings())
        report = asyncio.run(service.analyze(" Потік "))
        assert report.word == "потік"
        assert report.error is None
        assert report.total_count == 2
        assert [e.date for e in report.episodes] == ["2024-01-01", "2024-02-01"]
        assert report.speakers == {"Максим": 1, "Аліна": 1}

    def test_cached_between_calls(self, corpus):
        source = RecordingSource(corpus)
        service = AnalysisService(source, EngineSettings())
        first = asyncio.run(service.analyze("потік"))
        second = asyncio.run(service.analyze("ПОТІК"))
        assert second is first
        assert source.listings == 1

    def test_cache_expiry_triggers_new_analysis(self, corpus):
        now = [0.0]
        source = RecordingSource(corpus)
        service = AnalysisService(source, EngineSettings(), cache=ReportCache(5, clock=lambda: now[0]))
        asyncio.run(service.analyze("потік"))
        now[0] = 5.0
        asyncio.run(service.analyze("потік"))
        assert source.listings == 2

    def test_concurrent_requests_coalesce(self, corpus):
        source = RecordingSource(corpus, delay=0.05)
        service = AnalysisService(source, EngineSettings())

        async def both():
            return await asyncio.gather(service.analyze("потік"), service.analyze("Потік"))

        first, second = asyncio.run(both())
        assert first is second
        assert source.listings == 1
        assert source.loads == 2

    def test_timeout_returns_error_report(self, corpus):
        source = RecordingSource(corpus, delay=0.5)
        service = AnalysisService(source, EngineSettings(), ServiceSettings(timeout_seconds=0.05))
        report = asyncio.run(service.analyze("потік"))
        assert report.error is not None and "timed out" in report.error
        assert report.total_count == 0
        assert report.episodes == [] and report.contexts == []
        assert len(service.cache) == 0

    def test_unavailable_episode_skipped(self, srt, metadata):
        source = MemoryEpisodeSource(
            {
                "2024-01-01": srt([(0, 3, "[Максим] потік")]),
                "2024-01-02": srt([(0, 3, "[Максим] потік")]),
            },
            {"2024-01-02": metadata},
        )
        report = asyncio.run(AnalysisService(source, EngineSettings()).analyze("потік"))
        assert report.error is None
        assert [e.date for e in report.episodes] == ["2024-01-02"]

    def test_broken_episode_skipped(self, corpus):
        class BrokenSource(RecordingSource):
            def load_episode(self, date: str) -> EpisodeData:
                if date == "2024-01-01":
                    raise RuntimeError("disk error")
                return super().load_episode(date)

        report = asyncio.run(AnalysisService(BrokenSource(corpus), EngineSettings()).analyze("потік"))
        assert report.error is None
        assert [e.date for e in report.episodes] == ["2024-02-01"]
        assert report.speakers == {"Аліна": 1}

    def test_listing_failure_is_degraded(self, corpus):
        service = AnalysisService(RecordingSource(corpus, fail_listing=True), EngineSettings())
        report = asyncio.run(service.analyze("потік"))
        assert report.error == "storage offline"
        assert report.total_count == 0

    def test_single_worker(self, corpus):
        service = AnalysisService(corpus, EngineSettings(), ServiceSettings(max_concurrency=1))
        assert asyncio.run(service.analyze("потік")).total_count == 2


def test_unavailable_error_message():
    exc = EpisodeUnavailableError("2024-01-01", "gone")
    assert str(exc) == "Episode 2024-01-01 unavailable: gone"
