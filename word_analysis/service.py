# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Analysis service boundary.

The service wraps the pure analysis engine with everything a caller needs:
- query validation (a single non-empty term, trimmed and lower-cased),
- episode retrieval from a corpus source, in worker threads,
- an overall time budget,
- degraded error reports instead of exceptions for analysis failures,
- a TTL cache and coalescing of concurrent requests for the same term.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

from word_analysis.config import EngineSettings, ServiceSettings
from word_analysis.corpus import EpisodeSource, EpisodeUnavailableError
from word_analysis.engine.episode import analyze_episode
from word_analysis.engine.models import EpisodeResult, Report
from word_analysis.engine.report import ReportAggregator


logger = logging.getLogger(__name__)


class InvalidQueryError(ValueError):
    """Raised when the query term is missing or blank."""

    pass


def normalize_term(raw: object) -> str:
    """
    Validate and normalize a query term.

    Args:
        raw:
            Term as received from the caller.

    Returns:
        The trimmed, lower-cased term.

    Raises:
        InvalidQueryError:
            If the term is not a string or contains only whitespace.
    """

    if not isinstance(raw, str) or not raw.strip():
        raise InvalidQueryError("Word parameter is required")

    return raw.strip().lower()


@dataclass(frozen=True)
class _CacheEntry:
    report: Report
    stored_at: float


class ReportCache:
    """
    In-memory report cache with time-to-live eviction.

    Expired entries are dropped when they are looked up, counted, or when a
    new entry is stored.

    Args:
        ttl_seconds:
            Entry lifetime. Zero or less disables the cache.
        clock:
            Monotonic time source (seconds).
    """

    def __init__(self, ttl_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def get(self, term: str) -> Report | None:
        entry = self._entries.get(term)
        if entry is None:
            return None

        if self._expired(entry):
            del self._entries[term]
            return None

        return entry.report

    def put(self, term: str, report: Report) -> None:
        if not self.enabled:
            return
        self._prune()
        self._entries[term] = _CacheEntry(report=report, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        self._prune()
        return len(self._entries)

    def _prune(self) -> None:
        for term in [t for t, e in self._entries.items() if self._expired(e)]:
            del self._entries[term]

    def _expired(self, entry: _CacheEntry) -> bool:
        return self._clock() - entry.stored_at >= self._ttl


class AnalysisService:
    """
    Run word analyses over a corpus source.

    Args:
        source:
            Supplier of episode transcripts and metadata.
        engine:
            Engine thresholds.
        settings:
            Timeout, cache and concurrency settings.
        cache:
            Optional cache instance (a new one is created from `settings`
            otherwise).
    """

    def __init__(
        self,
        source: EpisodeSource,
        engine: EngineSettings,
        settings: ServiceSettings | None = None,
        *,
        cache: ReportCache | None = None,
    ) -> None:
        self._source = source
        self._engine = engine
        self._settings = settings or ServiceSettings()
        self._cache = cache if cache is not None else ReportCache(self._settings.cache_ttl_seconds)
        self._inflight: dict[str, asyncio.Task[Report]] = {}

    @property
    def cache(self) -> ReportCache:
        return self._cache

    async def analyze(self, raw_term: object) -> Report:
        """
        Analyze one term.

        Concurrent calls for the same term share a single analysis. Successful
        reports are cached; error reports are not.

        Args:
            raw_term:
                Query term as received from the caller.

        Returns:
            The report. Timeouts and unexpected failures produce a report with
            zero counts and `error` set.

        Raises:
            InvalidQueryError:
                If the term is blank. No analysis is attempted.
        """

        term = normalize_term(raw_term)

        cached = self._cache.get(term)
        if cached is not None:
            logger.debug('Cache hit for "%s"', term)
            return cached

        task = self._inflight.get(term)
        if task is None:
            task = asyncio.ensure_future(self._analyze_uncached(term))
            self._inflight[term] = task
            task.add_done_callback(lambda _t, key=term: self._inflight.pop(key, None))
        else:
            logger.debug('Joining running analysis for "%s"', term)

        return await asyncio.shield(task)

    async def _analyze_uncached(self, term: str) -> Report:
        timeout = self._settings.timeout_seconds
        logger.info('Processing search for term: "%s"', term)

        try:
            report = await asyncio.wait_for(self._run(term), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error('Analysis of "%s" timed out after %g seconds', term, timeout)
            return Report.failed(term, f"Analysis timed out after {timeout:g} seconds")
        except Exception as exc:  # noqa: BLE001
            logger.exception('Error analyzing word usage for "%s"', term)
            return Report.failed(term, str(exc) or "Error analyzing word usage")

        logger.info('Analysis complete for "%s". Total occurrences: %d', term, report.total_count)
        self._cache.put(term, report)
        return report

    async def _run(self, term: str) -> Report:
        dates = await asyncio.to_thread(self._source.episode_dates)
        logger.info("Found %d episode(s)", len(dates))

        semaphore = asyncio.Semaphore(self._settings.max_concurrency)

        async def _one(date: str) -> EpisodeResult | None:
            async with semaphore:
                return await asyncio.to_thread(self._analyze_one, date, term)

        results = await asyncio.gather(*(_one(d) for d in dates))

        # Single writer: merge in listing order so the snippet cap is a running total.
        aggregator = ReportAggregator(term, max_contexts=self._engine.max_contexts)
        for result in results:
            aggregator.add(result)
        return aggregator.build()

    def _analyze_one(self, date: str, term: str) -> EpisodeResult | None:
        # One broken episode must not fail the whole report.
        try:
            episode = self._source.load_episode(date)
            result = analyze_episode(episode, term, self._engine)
        except EpisodeUnavailableError as exc:
            logger.warning("Skipping episode: %s", exc)
            return None
        except Exception:  # noqa: BLE001
            logger.warning("Skipping episode %s after an unexpected error", date, exc_info=True)
            return None

        if result is not None:
            logger.info(
                'Found %d occurrence(s) of "%s" in episode %s',
                result.occurrence_count,
                term,
                date,
            )
        return result
