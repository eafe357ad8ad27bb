from __future__ import annotations

"""
Shared action interface.

Every subcommand is an object with a name, a help text, an argument hook and
a `run` method. The CLI builds its parser from these objects.
"""

import argparse
from typing import Protocol

from word_analysis.config import WordAnalysisConfig


class Action(Protocol):
    """
    Interface for a CLI action (subcommand).

    Attributes:
        name:
            Subcommand name.
        help:
            One-line description shown by `--help`.
        requires_config:
            If True, the CLI loads `word-analysis.yaml` before calling `run`.
    """

    name: str
    help: str
    requires_config: bool

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Register action-specific arguments on the action's subparser."""

    def run(self, args: argparse.Namespace, config: WordAnalysisConfig | None) -> None:
        """Execute the action with its parsed arguments and the loaded config."""


def require_config(config: WordAnalysisConfig | None, action: str) -> WordAnalysisConfig:
    """
    Return the config or fail for actions that cannot run without one.

    Raises:
        RuntimeError:
            If no configuration was loaded.
    """

    if config is None:
        raise RuntimeError(f"{action} requires a config, but none was provided")
    return config
