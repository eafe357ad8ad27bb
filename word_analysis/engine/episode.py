# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Single-episode analysis."""

import logging
from typing import Any, Sequence

from word_analysis.config import EngineSettings
from word_analysis.engine.context import ContextBuilder, build_youtube_link, extract_video_id
from word_analysis.engine.dedup import ContextDeduplicator
from word_analysis.engine.models import EpisodeData, EpisodeResult, MatchContext
from word_analysis.engine.occurrences import count_occurrences
from word_analysis.transcripts.base import Cue
from word_analysis.transcripts.srt_parser import parse_srt
from word_analysis.transcripts.utterance import extract_utterances


logger = logging.getLogger(__name__)

_THUMBNAIL_SIZES = ("medium", "high", "default")


def thumbnail_url(metadata: dict[str, Any]) -> str:
    """Return the episode thumbnail URL from video metadata, or an empty string.

    The medium-size thumbnail is preferred; larger and default sizes are
    fallbacks.
    """

    thumbnails = metadata.get("thumbnails") if isinstance(metadata, dict) else None
    if not isinstance(thumbnails, dict):
        return ""

    for size in _THUMBNAIL_SIZES:
        entry = thumbnails.get(size)
        if isinstance(entry, dict):
            url = entry.get("url")
            if isinstance(url, str) and url.strip():
                return url.strip()

    return ""


def analyze_cues(
    cues: Sequence[Cue],
    term: str,
    *,
    episode_date: str,
    metadata: dict[str, Any],
    settings: EngineSettings,
) -> EpisodeResult | None:
    """
    Count occurrences and collect snippets in one episode.

    Cues are walked in order. Only utterances of valid speakers are counted.
    Every matching cue is a snippet candidate that must pass the snippet
    validity check and the duplicate filters.

    Args:
        cues:
            Parsed cues of the episode.
        term:
            Normalized (trimmed, lower-cased) query term.
        episode_date:
            Episode date string.
        metadata:
            Episode metadata (thumbnail source).
        settings:
            Engine settings.

    Returns:
        The episode tally, or None if the term does not occur.
    """

    utterances = extract_utterances(cues)
    builder = ContextBuilder(
        cues,
        utterances,
        valid_speakers=settings.valid_speakers,
        settings=settings.context,
    )
    dedup = ContextDeduplicator(settings.dedup)

    thumb = thumbnail_url(metadata)
    video_id = extract_video_id(thumb)

    result = EpisodeResult(date=episode_date)

    for idx, (cue, utterance) in enumerate(zip(cues, utterances)):
        if utterance is None or utterance.speaker not in settings.valid_speakers:
            continue

        occurrences = count_occurrences(
            utterance.speech,
            term,
            overlapping=settings.overlapping_matches,
        )
        if occurrences == 0:
            continue

        result.occurrence_count += occurrences
        result.speaker_counts[utterance.speaker] = (
            result.speaker_counts.get(utterance.speaker, 0) + occurrences
        )

        if not dedup.wants(utterance.speaker) or dedup.has_signature(cue.start):
            continue

        text = builder.build(idx, term)
        if text is None:
            continue

        dedup.offer(
            MatchContext(
                episode=episode_date,
                time=cue.start,
                speaker=utterance.speaker,
                text=text,
                thumbnail_url=thumb,
                youtube_link=build_youtube_link(video_id, cue.start),
            )
        )

    if result.occurrence_count == 0:
        return None

    result.contexts = dedup.select(dedup.accepted)
    logger.debug(
        "Episode %s: %d occurrence(s), %d snippet(s)",
        episode_date,
        result.occurrence_count,
        len(result.contexts),
    )
    return result


def analyze_episode(episode: EpisodeData, term: str, settings: EngineSettings) -> EpisodeResult | None:
    """Parse an episode transcript and analyze it (see `analyze_cues`)."""

    cues = parse_srt(episode.transcript)
    logger.debug("Parsed %d cue(s) for episode %s", len(cues), episode.date)

    return analyze_cues(
        cues,
        term,
        episode_date=episode.date,
        metadata=episode.metadata,
        settings=settings,
    )
