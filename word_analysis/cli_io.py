# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Overwrite confirmation for actions that write files.

An existing file is only replaced with `--force` or after the user confirmed
it in an interactive terminal. Pipes and CI runs never block on a prompt.
"""

import sys
from pathlib import Path

from word_analysis.config import ConfigError


def is_interactive_tty() -> bool:
    """True if both stdin and stdout are terminals."""

    try:
        return sys.stdin.isatty() and sys.stdout.isatty()
    except (AttributeError, ValueError):
        # Replaced or closed standard streams.
        return False


def ask_yes_no(question: str) -> bool:
    """Ask until the user answers yes or no. An empty answer means no."""

    while True:
        answer = input(f"{question} [y/N] ").strip().lower()
        if answer in {"", "n", "no"}:
            return False
        if answer in {"y", "yes"}:
            return True


def may_overwrite(path: Path, *, force: bool) -> bool:
    """
    Decide whether `path` may be written.

    Args:
        path:
            Output file.
        force:
            Value of the action's `--force` flag.

    Returns:
        True if the file does not exist, `force` is set or the user agreed.
        False if the user declined.

    Raises:
        ConfigError:
            If the file exists, `force` is not set and no terminal is attached.
    """

    if force or not path.exists():
        return True

    if not is_interactive_tty():
        raise ConfigError(f"Refusing to overwrite existing file: {path} (use --force)")

    return ask_yes_no(f"Output file already exists: {path}. Overwrite?")
