# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Analysis result types.

Field names are Pythonic; `to_dict()` produces the camelCase report shape
that callers (and saved report files) use.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class EpisodeData:
    """
    Raw input for one episode.

    Attributes:
        date:
            Episode date (`YYYY-MM-DD`).
        transcript:
            Raw SRT text.
        metadata:
            Episode metadata mapping. Only the thumbnail URL is used.
    """

    date: str
    transcript: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MatchContext:
    """
    Evidence snippet for one occurrence.

    Attributes:
        episode:
            Episode date.
        time:
            Start of the matched cue in seconds.
        speaker:
            Speaker of the matched cue.
        text:
            Sanitized snippet text.
        thumbnail_url:
            Episode thumbnail URL (may be empty).
        youtube_link:
            Deep link to the moment in the video, or None if no video id is known.
    """

    episode: str
    time: float
    speaker: str
    text: str
    thumbnail_url: str = ""
    youtube_link: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "episode": self.episode,
            "time": self.time,
            "speaker": self.speaker,
            "text": self.text,
            "thumbnailUrl": self.thumbnail_url,
            "youtubeLink": self.youtube_link,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MatchContext:
        link = data.get("youtubeLink")
        return cls(
            episode=str(data.get("episode") or ""),
            time=float(data.get("time") or 0.0),
            speaker=str(data.get("speaker") or ""),
            text=str(data.get("text") or ""),
            thumbnail_url=str(data.get("thumbnailUrl") or ""),
            youtube_link=str(link) if link else None,
        )


@dataclass
class EpisodeResult:
    """
    Tally for one episode with at least one occurrence.

    Attributes:
        date:
            Episode date.
        occurrence_count:
            Number of occurrences in valid-speaker utterances.
        speaker_counts:
            Occurrences per speaker.
        contexts:
            Selected snippets, ordered by time.
    """

    date: str
    occurrence_count: int = 0
    speaker_counts: dict[str, int] = field(default_factory=dict)
    contexts: list[MatchContext] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "occurrenceCount": self.occurrence_count,
            "speakerCounts": dict(self.speaker_counts),
            "contexts": [c.to_dict() for c in self.contexts],
        }


@dataclass(frozen=True)
class EpisodeCount:
    """Per-episode entry of the report."""

    date: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "count": self.count}


@dataclass
class Report:
    """
    Aggregated result for one query term over the whole corpus.

    Attributes:
        word:
            Normalized query term.
        total_count:
            Sum of all episode counts.
        episodes:
            Episodes with at least one occurrence, ordered by date.
        speakers:
            Occurrences per speaker across all episodes.
        contexts:
            Evidence snippets, capped globally.
        error:
            Error message for degraded reports, otherwise None.
    """

    word: str
    total_count: int = 0
    episodes: list[EpisodeCount] = field(default_factory=list)
    speakers: dict[str, int] = field(default_factory=dict)
    contexts: list[MatchContext] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def failed(cls, word: str, error: str) -> Report:
        """Build a degraded report with zero counts."""

        return cls(word=word, error=error)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "word": self.word,
            "totalCount": self.total_count,
            "episodes": [e.to_dict() for e in self.episodes],
            "speakers": dict(self.speakers),
            "contexts": [c.to_dict() for c in self.contexts],
        }
        if self.error is not None:
            out["error"] = self.error
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Report:
        """Rebuild a report from its serialized form (e.g. a saved report file)."""

        episodes = [
            EpisodeCount(date=str(e.get("date") or ""), count=int(e.get("count") or 0))
            for e in data.get("episodes") or []
            if isinstance(e, dict)
        ]
        speakers_raw = data.get("speakers")
        speakers = (
            {str(k): int(v) for k, v in speakers_raw.items()} if isinstance(speakers_raw, dict) else {}
        )
        contexts = [
            MatchContext.from_dict(c) for c in data.get("contexts") or [] if isinstance(c, dict)
        ]
        error = data.get("error")

        return cls(
            word=str(data.get("word") or ""),
            total_count=int(data.get("totalCount") or 0),
            episodes=episodes,
            speakers=speakers,
            contexts=contexts,
            error=str(error) if error else None,
        )
