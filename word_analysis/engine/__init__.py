"""Transcript analysis engine.

The engine is a pure function of (episodes, term, settings): it counts term
occurrences per speaker, builds de-duplicated context snippets and aggregates
everything into a `Report`. Retrieval, caching and timeouts live in
`word_analysis.service`.
"""

from word_analysis.engine.episode import analyze_cues, analyze_episode
from word_analysis.engine.models import EpisodeData, EpisodeResult, MatchContext, Report
from word_analysis.engine.occurrences import count_occurrences
from word_analysis.engine.report import ReportAggregator, aggregate, analyze_corpus

__all__ = [
    "EpisodeData",
    "EpisodeResult",
    "MatchContext",
    "Report",
    "ReportAggregator",
    "aggregate",
    "analyze_corpus",
    "analyze_cues",
    "analyze_episode",
    "count_occurrences",
]
