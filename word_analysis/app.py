from __future__ import annotations

"""
CLI entrypoint for the word analysis tool.

This module builds a git-style subcommand CLI (via argparse) and dispatches
execution to action modules.
"""

import argparse
import logging
import sys
from dotenv import load_dotenv

from word_analysis.actions.analyze import AnalyzeAction
from word_analysis.actions.base import Action
from word_analysis.actions.template import TemplateAction
from word_analysis.actions.write_output import WriteOutputAction
from word_analysis.config import ConfigError, find_config_path, load_config
from word_analysis.logging_utils import configure_logging
from word_analysis.service import InvalidQueryError


logger = logging.getLogger(__name__)


def _action_repository() -> dict[str, Action]:
	"""
	Construct the action registry.

	Returns:
		A mapping from subcommand name to an action instance.
	"""
	actions: list[Action] = [
		TemplateAction(),
		AnalyzeAction(),
		WriteOutputAction(),
	]
	return {a.name: a for a in actions}


def build_parser() -> argparse.ArgumentParser:
	"""
	Build the top-level argument parser.

	Each action registers its own subcommand arguments. Actions that need the
	YAML config additionally get `--config`.

	Returns:
		The configured ArgumentParser instance.
	"""
	parser = argparse.ArgumentParser(
		prog="word-analysis",
		description="Count how often a word is used in podcast transcripts, by episode and speaker.",
	)

	config_parent = argparse.ArgumentParser(add_help=False)
	config_parent.add_argument(
		"--config",
		"-c",
		help="Path to word-analysis.yaml. If omitted, ./word-analysis.yaml is used.",
	)

	subparsers = parser.add_subparsers(dest="action", metavar="COMMAND", required=True)

	for name, action in _action_repository().items():
		parents = [config_parent] if action.requires_config else []
		sub = subparsers.add_parser(name, help=action.help, parents=parents)
		action.add_arguments(sub)
		sub.set_defaults(_action_name=name)

	return parser


def main(argv: list[str] | None = None) -> int:
	"""
	Run the CLI.

	Args:
		argv:
			Optional argument list (without program name). If omitted, argparse
			reads from sys.argv.

	Returns:
		Process exit code. `0` on success, `2` on configuration, usage or
		query validation errors.
	"""
	load_dotenv()

	parser = build_parser()
	args = parser.parse_args(argv)

	actions = _action_repository()
	action = actions[args._action_name]

	try:
		config = None
		if action.requires_config:
			config = load_config(find_config_path(getattr(args, "config", None)))
			configure_logging(config.log_level)
		else:
			configure_logging()

		logger.debug("Running action %s", action.name)
		action.run(args, config)
		return 0
	except (ConfigError, InvalidQueryError) as exc:
		print(f"error: {exc}", file=sys.stderr)
		return 2


if __name__ == "__main__":
	raise SystemExit(main())
