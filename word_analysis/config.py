# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Configuration loading and validation.

This module handles reading `word-analysis.yaml`, validating its keys, and
normalizing paths so that the engine and the actions can rely on typed,
immutable settings objects.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


DEFAULT_SPEAKERS: tuple[str, ...] = ("Максим", "Олександра", "Аліна")


class ConfigError(RuntimeError):
    """
    Raised when the YAML configuration is missing, invalid, or cannot be parsed.
    """

    pass


@dataclass(frozen=True)
class ContextSettings:
    """
    Settings for building context snippets around a match.

    Attributes:
        max_extension_cues:
            Maximum number of same-speaker cues added around the matched cue
            (shared by both directions).
        max_time_gap:
            Maximum distance in seconds between the matched cue and a cue
            used for extension.
        extend_short_only:
            If True, only extend when the matched speech is shorter than
            `min_context_length`.
        min_context_length:
            Speech length (characters) below which a snippet counts as short.
        conversational:
            If True, add nearby turns of other valid speakers.
        dialogue_time_gap:
            Time window in seconds for other-speaker turns.
        max_exchanges:
            Maximum number of other-speaker turns per direction.
        inline_threshold:
            Conversational context shorter than this is appended inline,
            longer context goes into a separate labeled block.
        min_words:
            Minimum number of words left after removing the term.
        min_length:
            Minimum total snippet length in characters.
        validate_own_speech:
            If True, the speaker's own text must pass the validity check
            before conversational context is attached.
    """

    max_extension_cues: int = 4
    max_time_gap: float = 15.0
    extend_short_only: bool = False
    min_context_length: int = 30
    conversational: bool = True
    dialogue_time_gap: float = 10.0
    max_exchanges: int = 2
    inline_threshold: int = 100
    min_words: int = 5
    min_length: int = 10
    validate_own_speech: bool = False


@dataclass(frozen=True)
class DedupSettings:
    """
    Settings for near-duplicate suppression.

    Attributes:
        enabled:
            If False, every valid snippet is kept (up to the episode cap).
        time_signature:
            If True, only one snippet per rounded second and episode.
        similarity_ceiling:
            Upper bound of the similarity threshold.
        similarity_floor:
            Base of the length-adjusted similarity threshold.
        length_factor:
            Numerator of the length-dependent threshold term.
        max_episode_contexts:
            Maximum number of snippets kept per episode.
    """

    enabled: bool = True
    time_signature: bool = True
    similarity_ceiling: float = 0.8
    similarity_floor: float = 0.6
    length_factor: float = 20.0
    max_episode_contexts: int = 20


@dataclass(frozen=True)
class EngineSettings:
    """
    All thresholds consumed by the analysis engine.

    Attributes:
        valid_speakers:
            Speaker labels eligible for analysis.
        overlapping_matches:
            If True, overlapping occurrences of the term are all counted.
        max_contexts:
            Global cap for snippets in the final report.
        context:
            Snippet building settings.
        dedup:
            Duplicate suppression settings.
    """

    valid_speakers: frozenset[str] = frozenset(DEFAULT_SPEAKERS)
    overlapping_matches: bool = True
    max_contexts: int = 20
    context: ContextSettings = field(default_factory=ContextSettings)
    dedup: DedupSettings = field(default_factory=DedupSettings)


@dataclass(frozen=True)
class ServiceSettings:
    """
    Settings for the analysis service boundary.

    Attributes:
        timeout_seconds:
            Time budget for one complete analysis.
        cache_ttl_seconds:
            Lifetime of cached reports. Zero disables caching.
        max_concurrency:
            Number of episodes loaded and analyzed at the same time.
    """

    timeout_seconds: float = 15.0
    cache_ttl_seconds: float = 3600.0
    max_concurrency: int = 4


@dataclass(frozen=True)
class WordAnalysisConfig:
    """
    Parsed configuration for a word analysis run.

    Attributes:
        config_path:
            Path to the YAML config file used for this run.
        base_dir:
            Directory that relative paths are resolved against.
        corpus_dir:
            Directory containing the episode transcripts and metadata.
        outdir:
            Directory for report files.
        outfile:
            Target ODS path for the spreadsheet export.
        engine:
            Engine thresholds.
        service:
            Service boundary settings.
        log_level:
            Logging level name.
    """

    config_path: Path
    base_dir: Path
    corpus_dir: Path
    outdir: Path
    outfile: Path
    engine: EngineSettings
    service: ServiceSettings
    log_level: str = "INFO"


def find_config_path(cli_path: str | None) -> Path:
    """
    Determine which YAML config file to use.

    Args:
        cli_path:
            Optional config path provided on the command line.

    Returns:
        The resolved Path object (not necessarily existing).
    """

    if cli_path:
        return Path(cli_path)

    return Path.cwd() / "word-analysis.yaml"


def load_config(path: Path) -> WordAnalysisConfig:
    """
    Load and validate a `word-analysis.yaml` configuration file.

    Args:
        path:
            Path to the YAML config file.

    Returns:
        A validated WordAnalysisConfig instance.

    Raises:
        ConfigError:
            If the file is missing, cannot be parsed as YAML, or contains
            invalid values.
    """

    if not path.exists():
        raise ConfigError(
            "No word-analysis.yaml found in current directory and no --config provided. "
            "Use the 'template' command to create one or pass --config PATH."
        )
    if not path.is_file():
        raise ConfigError(f"Config path is not a file: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to read YAML config: {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Config YAML must contain a mapping at the top level")

    corpus = raw.get("corpus")
    if not isinstance(corpus, str) or not corpus.strip():
        raise ConfigError("'corpus' must be a non-empty string")

    outdir = _optional_str(raw, "outdir", "reports")
    outfile = _optional_str(raw, "outfile", "word-analysis.ods")

    base_dir = path.parent.resolve()

    return WordAnalysisConfig(
        config_path=path.resolve(),
        base_dir=base_dir,
        corpus_dir=(base_dir / corpus.strip()).resolve(),
        outdir=(base_dir / outdir).resolve(),
        outfile=(base_dir / outfile).resolve(),
        engine=parse_engine_settings(raw),
        service=_parse_service(raw.get("service")),
        log_level=_parse_log_level(raw.get("logging")),
    )


def parse_engine_settings(raw: dict[str, Any]) -> EngineSettings:
    """
    Build engine settings from the top-level config mapping.

    Missing sections fall back to defaults.

    Args:
        raw:
            Top-level YAML mapping.

    Returns:
        An EngineSettings instance.

    Raises:
        ConfigError:
            If any section exists but is not valid.
    """

    speakers = _parse_speakers(raw.get("speakers"))

    counting = _section(raw, "counting")
    overlapping = counting.get("overlapping", EngineSettings.overlapping_matches)
    if not isinstance(overlapping, bool):
        raise ConfigError("counting.overlapping must be a boolean")

    report = _section(raw, "report")
    max_contexts = _int(report, "max_contexts", EngineSettings.max_contexts, "report", minimum=0)

    return EngineSettings(
        valid_speakers=speakers,
        overlapping_matches=overlapping,
        max_contexts=max_contexts,
        context=_parse_context(_section(raw, "context")),
        dedup=_parse_dedup(_section(raw, "dedup")),
    )


def _parse_speakers(value: Any) -> frozenset[str]:
    """Parse the valid-speaker allow-list."""

    if value is None:
        return frozenset(DEFAULT_SPEAKERS)

    if not isinstance(value, list) or not value:
        raise ConfigError("'speakers' must be a non-empty list")

    speakers: set[str] = set()
    for idx, item in enumerate(value, start=1):
        if not isinstance(item, str) or not item.strip():
            raise ConfigError(f"Speaker must be a non-empty string (problem at index {idx})")
        speakers.add(item.strip())

    return frozenset(speakers)


def _parse_context(value: dict[str, Any]) -> ContextSettings:
    defaults = ContextSettings()
    max_time_gap = _number(value, "max_time_gap", defaults.max_time_gap, "context")
    dialogue_time_gap = _number(value, "dialogue_time_gap", defaults.dialogue_time_gap, "context")

    return ContextSettings(
        max_extension_cues=_int(value, "max_extension_cues", defaults.max_extension_cues, "context", minimum=0),
        max_time_gap=max_time_gap,
        extend_short_only=_bool(value, "extend_short_only", defaults.extend_short_only, "context"),
        min_context_length=_int(value, "min_context_length", defaults.min_context_length, "context", minimum=0),
        conversational=_bool(value, "conversational", defaults.conversational, "context"),
        dialogue_time_gap=dialogue_time_gap,
        max_exchanges=_int(value, "max_exchanges", defaults.max_exchanges, "context", minimum=0),
        inline_threshold=_int(value, "inline_threshold", defaults.inline_threshold, "context", minimum=0),
        min_words=_int(value, "min_words", defaults.min_words, "context", minimum=0),
        min_length=_int(value, "min_length", defaults.min_length, "context", minimum=0),
        validate_own_speech=_bool(value, "validate_own_speech", defaults.validate_own_speech, "context"),
    )


def _parse_dedup(value: dict[str, Any]) -> DedupSettings:
    defaults = DedupSettings()

    ceiling = _number(value, "similarity_ceiling", defaults.similarity_ceiling, "dedup")
    floor = _number(value, "similarity_floor", defaults.similarity_floor, "dedup")
    if not 0.0 <= floor <= ceiling <= 1.0:
        raise ConfigError("dedup thresholds must satisfy 0 <= similarity_floor <= similarity_ceiling <= 1")

    return DedupSettings(
        enabled=_bool(value, "enabled", defaults.enabled, "dedup"),
        time_signature=_bool(value, "time_signature", defaults.time_signature, "dedup"),
        similarity_ceiling=ceiling,
        similarity_floor=floor,
        length_factor=_number(value, "length_factor", defaults.length_factor, "dedup"),
        max_episode_contexts=_int(
            value, "max_episode_contexts", defaults.max_episode_contexts, "dedup", minimum=0
        ),
    )


def _parse_service(value: Any) -> ServiceSettings:
    """
    Parse and validate the optional `service` section.

    Args:
        value:
            Raw YAML value for the `service` key.

    Returns:
        A ServiceSettings instance (with defaults if section is missing).

    Raises:
        ConfigError:
            If the section exists but is not valid.
    """

    if value is None:
        return ServiceSettings()

    if not isinstance(value, dict):
        raise ConfigError("'service' must be a mapping if provided")

    defaults = ServiceSettings()
    timeout = _number(value, "timeout_seconds", defaults.timeout_seconds, "service")
    if timeout <= 0:
        raise ConfigError("service.timeout_seconds must be > 0")

    max_concurrency = _int(value, "max_concurrency", defaults.max_concurrency, "service", minimum=1)

    return ServiceSettings(
        timeout_seconds=timeout,
        cache_ttl_seconds=_number(value, "cache_ttl_seconds", defaults.cache_ttl_seconds, "service"),
        max_concurrency=max_concurrency,
    )


def _parse_log_level(value: Any) -> str:
    if value is None:
        return "INFO"
    if not isinstance(value, dict):
        raise ConfigError("'logging' must be a mapping if provided")

    level = value.get("level", "INFO")
    if not isinstance(level, str) or level.strip().upper() not in {
        "DEBUG",
        "INFO",
        "WARNING",
        "ERROR",
        "CRITICAL",
    }:
        raise ConfigError("logging.level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")

    return level.strip().upper()


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping if provided")
    return value


def _optional_str(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' must be a non-empty string if provided")
    return value.strip()


def _bool(section: dict[str, Any], key: str, default: bool, context: str) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{context}.{key} must be a boolean")
    return value


def _int(section: dict[str, Any], key: str, default: int, context: str, *, minimum: int) -> int:
    value = section.get(key, default)
    # bool is a subclass of int, reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{context}.{key} must be an integer")
    if value < minimum:
        raise ConfigError(f"{context}.{key} must be >= {minimum}")
    return value


def _number(section: dict[str, Any], key: str, default: float, context: str) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{context}.{key} must be a number")
    if value < 0:
        raise ConfigError(f"{context}.{key} must be >= 0")
    return float(value)
