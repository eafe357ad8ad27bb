# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Corpus-level aggregation of episode results."""

import logging
from typing import Iterable

from word_analysis.config import EngineSettings
from word_analysis.engine.episode import analyze_episode
from word_analysis.engine.models import EpisodeCount, EpisodeData, EpisodeResult, Report


logger = logging.getLogger(__name__)


class ReportAggregator:
    """
    Merge episode results into one report.

    Results may arrive in any order. Snippets are appended only while the
    global cap has room, so the episodes added first fill the snippet list.

    Args:
        term:
            Normalized query term.
        max_contexts:
            Global snippet cap.
    """

    def __init__(self, term: str, *, max_contexts: int = 20) -> None:
        self._report = Report(word=term)
        self._max_contexts = max_contexts

    def add(self, result: EpisodeResult | None) -> None:
        """Merge one episode result. None and zero-count results are ignored."""

        if result is None or result.occurrence_count <= 0:
            return

        report = self._report
        report.total_count += result.occurrence_count
        report.episodes.append(EpisodeCount(date=result.date, count=result.occurrence_count))

        for speaker, count in result.speaker_counts.items():
            report.speakers[speaker] = report.speakers.get(speaker, 0) + count

        available = self._max_contexts - len(report.contexts)
        if available > 0:
            report.contexts.extend(result.contexts[:available])

    def build(self) -> Report:
        """Return the report with episodes in chronological order."""

        report = self._report
        return Report(
            word=report.word,
            total_count=report.total_count,
            episodes=sorted(report.episodes, key=lambda e: e.date),
            speakers=dict(report.speakers),
            contexts=list(report.contexts),
        )


def aggregate(results: Iterable[EpisodeResult | None], term: str, *, max_contexts: int = 20) -> Report:
    """Aggregate episode results into a report."""

    aggregator = ReportAggregator(term, max_contexts=max_contexts)
    for result in results:
        aggregator.add(result)
    return aggregator.build()


def analyze_corpus(episodes: Iterable[EpisodeData], term: str, settings: EngineSettings) -> Report:
    """
    Analyze all episodes sequentially and aggregate the results.

    Args:
        episodes:
            Episode inputs.
        term:
            Normalized query term.
        settings:
            Engine settings.

    Returns:
        The aggregated report.
    """

    aggregator = ReportAggregator(term, max_contexts=settings.max_contexts)
    for episode in episodes:
        result = analyze_episode(episode, term, settings)
        if result is not None:
            logger.info(
                'Found %d occurrence(s) of "%s" in episode %s',
                result.occurrence_count,
                term,
                episode.date,
            )
        aggregator.add(result)

    return aggregator.build()
