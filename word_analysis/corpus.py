# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Episode corpus sources.

A source lists episode dates and loads the raw transcript plus metadata of one
episode. The analysis engine never touches storage itself.

Supported directory layouts (episode dates are `YYYY-MM-DD`):

    <root>/2024-07-24/2024-07-24.srt
    <root>/2024-07-24/2024-07-24.json

or flat:

    <root>/2024-07-24.srt
    <root>/2024-07-24.json
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Protocol

from word_analysis.config import ConfigError
from word_analysis.engine.models import EpisodeData
from word_analysis.yaml_io import read_yaml_mapping


_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_METADATA_SUFFIXES = (".json", ".yaml", ".yml")


class EpisodeUnavailableError(RuntimeError):
    """Raised when an episode's transcript or metadata cannot be obtained."""

    def __init__(self, date: str, reason: str) -> None:
        super().__init__(f"Episode {date} unavailable: {reason}")
        self.date = date
        self.reason = reason


class EpisodeSource(Protocol):
    """Interface for suppliers of episode transcripts and metadata."""

    def episode_dates(self) -> list[str]:
        """Return the unique episode dates available in this source."""

        raise NotImplementedError

    def load_episode(self, date: str) -> EpisodeData:
        """
        Load one episode.

        Raises:
            EpisodeUnavailableError:
                If the transcript or the metadata is missing or unreadable.
        """

        raise NotImplementedError


@dataclass(frozen=True)
class DirectoryEpisodeSource:
    """
    Episodes stored as files below a root directory.

    Attributes:
        root:
            Corpus root directory.
    """

    root: Path

    def episode_dates(self) -> list[str]:
        if not self.root.is_dir():
            raise ConfigError(f"Corpus directory not found: {self.root}")

        dates: set[str] = set()
        for entry in self.root.iterdir():
            if entry.is_dir() and _DATE_RE.match(entry.name):
                dates.add(entry.name)
            elif entry.is_file() and entry.suffix.lower() == ".srt" and _DATE_RE.match(entry.stem):
                dates.add(entry.stem)

        return sorted(dates)

    def load_episode(self, date: str) -> EpisodeData:
        srt_path = self._find(date, (".srt",))
        if srt_path is None:
            raise EpisodeUnavailableError(date, "SRT file not found")

        meta_path = self._find(date, _METADATA_SUFFIXES)
        if meta_path is None:
            raise EpisodeUnavailableError(date, "metadata file not found")

        try:
            transcript = srt_path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise EpisodeUnavailableError(date, f"cannot read {srt_path}: {exc}") from exc

        try:
            metadata = read_yaml_mapping(meta_path)
        except ConfigError as exc:
            raise EpisodeUnavailableError(date, str(exc)) from exc

        return EpisodeData(date=date, transcript=transcript, metadata=metadata)

    def _find(self, date: str, suffixes: tuple[str, ...]) -> Path | None:
        for directory in (self.root / date, self.root):
            for suffix in suffixes:
                candidate = directory / f"{date}{suffix}"
                if candidate.is_file():
                    return candidate
        return None


class MemoryEpisodeSource:
    """
    Episodes held in memory.

    Args:
        transcripts:
            Mapping of episode date to raw SRT text.
        metadata:
            Mapping of episode date to metadata. Dates without an entry are
            treated as unavailable.
    """

    def __init__(
        self,
        transcripts: Mapping[str, str],
        metadata: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> None:
        self._transcripts = dict(transcripts)
        self._metadata = {k: dict(v) for k, v in (metadata or {}).items()}

    def episode_dates(self) -> list[str]:
        return sorted(self._transcripts)

    def load_episode(self, date: str) -> EpisodeData:
        transcript = self._transcripts.get(date)
        if transcript is None:
            raise EpisodeUnavailableError(date, "transcript not found")

        metadata = self._metadata.get(date)
        if metadata is None:
            raise EpisodeUnavailableError(date, "metadata not found")

        return EpisodeData(date=date, transcript=transcript, metadata=metadata)
