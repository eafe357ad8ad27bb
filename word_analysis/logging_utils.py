# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Logging configuration for the CLI.

Library modules only create module loggers. The CLI configures the root
logger once per run.
"""

import logging
import os


DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

LOG_LEVEL_ENV = "WORD_ANALYSIS_LOG_LEVEL"


def resolve_level(level: str | int | None) -> int:
    """Map a level name or number to a logging level (INFO for unknown values)."""

    if isinstance(level, int):
        return level
    if isinstance(level, str) and level.strip():
        value = logging.getLevelName(level.strip().upper())
        if isinstance(value, int):
            return value
    return logging.INFO


def configure_logging(level: str | int | None = None, *, force: bool = True) -> None:
    """
    Configure the root logger.

    Args:
        level:
            Level from the configuration. The `WORD_ANALYSIS_LOG_LEVEL`
            environment variable takes precedence when set.
        force:
            Replace handlers installed by an earlier configuration.
    """

    env_level = os.environ.get(LOG_LEVEL_ENV)
    logging.basicConfig(
        level=resolve_level(env_level or level),
        format=DEFAULT_FORMAT,
        force=force,
    )
