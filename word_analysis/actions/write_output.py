# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Spreadsheet export action.

This action collects saved reports from the output directory and writes a
single `.ods` workbook with four sheets:
    - Summary: one row per word with totals and the error message, if any.
    - Episodes: per-episode occurrence counts.
    - Speakers: per-speaker occurrence counts.
    - Contexts: the example snippets with timestamp and video link.
"""

import argparse
import hashlib
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from odfdo import Document
from odfdo.cell import Cell
from odfdo.column import Column
from odfdo.row import Row
from odfdo.style import Style
from odfdo.table import Table

from word_analysis.actions.base import require_config
from word_analysis.cli_io import may_overwrite
from word_analysis.config import ConfigError, WordAnalysisConfig
from word_analysis.engine.models import Report
from word_analysis.report_files import find_report_files, load_report


logger = logging.getLogger(__name__)


_XML_ILLEGAL_CHARS_RE = re.compile(
    # XML 1.0 disallows most C0 control chars except TAB, LF, CR.
    r"[\x00-\x08\x0B\x0C\x0E-\x1F]"
    r"|[\uD800-\uDFFF]"
    r"|[\uFFFE\uFFFF]"
)

# (key, header title); "count" columns are written as numbers.
Columns = list[tuple[str, str]]

SUMMARY_COLUMNS: Columns = [
    ("word", "Word"),
    ("total", "Total count"),
    ("episodes", "Episodes"),
    ("speakers", "Speakers"),
    ("error", "Error"),
]
EPISODE_COLUMNS: Columns = [("word", "Word"), ("date", "Episode"), ("count", "Count")]
SPEAKER_COLUMNS: Columns = [("word", "Word"), ("speaker", "Speaker"), ("count", "Count")]
CONTEXT_COLUMNS: Columns = [
    ("word", "Word"),
    ("episode", "Episode"),
    ("time", "Time"),
    ("speaker", "Speaker"),
    ("text", "Text"),
    ("link", "Link"),
]

_NUMERIC_KEYS = {"total", "episodes", "speakers", "count"}


def _xml_safe_text(value: Any) -> str:
    """Return text without the characters lxml refuses to serialize."""

    if value is None:
        return ""
    return _XML_ILLEGAL_CHARS_RE.sub("", str(value))


def _make_style_name(prefix: str, scope: str, *, suffix: str = "") -> str:
    """Return a deterministic ASCII style name for a sheet-scoped style."""

    scope_key = re.sub(r"[^A-Za-z0-9_]", "_", scope or "").strip("_")[:40] or "x"
    digest = hashlib.md5(scope.encode("utf-8"), usedforsecurity=False).hexdigest()
    parts = [prefix, scope_key, digest[:8]]
    if suffix:
        parts.append(re.sub(r"[^A-Za-z0-9_]", "_", suffix))
    return "_".join(parts)


def _insert_automatic_style(doc: Document, style: Style) -> Style | None:
    """Insert a style into the automatic styles; None if odfdo rejects it."""

    try:
        doc.insert_style(style, automatic=True)
    except Exception:  # noqa: BLE001
        logger.debug("Could not insert style %s", style.name, exc_info=True)
        return None
    return style


def format_timestamp(seconds: float) -> str:
    """Format seconds as `HH:MM:SS`."""

    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def summary_rows(reports: list[Report]) -> list[dict[str, Any]]:
    return [
        {
            "word": r.word,
            "total": r.total_count,
            "episodes": len(r.episodes),
            "speakers": len(r.speakers),
            "error": r.error or "",
        }
        for r in reports
    ]


def episode_rows(reports: list[Report]) -> list[dict[str, Any]]:
    return [{"word": r.word, "date": e.date, "count": e.count} for r in reports for e in r.episodes]


def speaker_rows(reports: list[Report]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for r in reports:
        for speaker, count in sorted(r.speakers.items(), key=lambda kv: (-kv[1], kv[0])):
            rows.append({"word": r.word, "speaker": speaker, "count": count})
    return rows


def context_rows(reports: list[Report]) -> list[dict[str, Any]]:
    return [
        {
            "word": r.word,
            "episode": c.episode,
            "time": format_timestamp(c.time),
            "speaker": c.speaker,
            "text": c.text,
            "link": c.youtube_link or "",
        }
        for r in reports
        for c in r.contexts
    ]


@dataclass(frozen=True)
class WriteOutputAction:
    """
    `write-output` subcommand.

    Builds the `.ods` workbook from reports written earlier by `analyze`.
    """

    name: str = "write-output"
    help: str = "Write saved reports to the output spreadsheet (.ods)"
    requires_config: bool = True

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "words",
            nargs="*",
            metavar="WORD",
            help="Only export these words (default: every saved report)",
        )
        parser.add_argument(
            "-f",
            "--force",
            action="store_true",
            help="Overwrite the output file if it already exists",
        )

    def run(self, args: argparse.Namespace, config: WordAnalysisConfig | None) -> None:
        """
        Execute the export.

        Args:
            args:
                Parsed args for the subcommand.
            config:
                Loaded configuration.

        Raises:
            ConfigError:
                If no reports are available, a named word has no report, or
                the output file exists and overwriting cannot be confirmed.
        """

        config = require_config(config, "WriteOutputAction")

        outfile = config.outfile
        if not may_overwrite(outfile, force=args.force):
            print(f"Keeping existing file: {outfile}")
            return

        paths = find_report_files(config.outdir, list(args.words or []))
        if not paths:
            raise ConfigError(f"No saved reports in {config.outdir}. Run the 'analyze' command first.")

        reports: list[Report] = []
        for path in paths:
            print(f"Loading report: {path}")
            reports.append(load_report(path))

        print(f"Building ODS report: {outfile}")
        doc = Document("spreadsheet")

        # Drop the default empty sheet so the workbook contains only ours.
        for table in list(doc.body.tables):
            doc.body.delete(table)

        sheets: list[tuple[str, Columns, Callable[[list[Report]], list[dict[str, Any]]]]] = [
            ("Summary", SUMMARY_COLUMNS, summary_rows),
            ("Episodes", EPISODE_COLUMNS, episode_rows),
            ("Speakers", SPEAKER_COLUMNS, speaker_rows),
            ("Contexts", CONTEXT_COLUMNS, context_rows),
        ]
        for sheet_name, columns, collect in sheets:
            self._append_sheet(doc, sheet_name, columns, collect(reports))

        outfile.parent.mkdir(parents=True, exist_ok=True)
        doc.save(outfile)
        print(f"Wrote ODS report: {outfile}")

    def _append_sheet(
        self,
        doc: Document,
        sheet_name: str,
        columns: Columns,
        rows: list[dict[str, Any]],
    ) -> None:
        """
        Append one sheet with a bold header row and width-adjusted columns.

        Args:
            doc:
                Target spreadsheet document.
            sheet_name:
                Sheet title.
            columns:
                Column keys and header titles.
            rows:
                Row values keyed by column key.
        """

        print(f"Writing sheet: {sheet_name}")
        table = Table(sheet_name)

        header_style = _insert_automatic_style(
            doc,
            Style("table-cell", name=_make_style_name("hdr", sheet_name), area="text", bold=True),
        )

        # Column widths: 0.12 cm per character of the longest value, clamped to [3cm, 24cm].
        widths = [len(title) for _key, title in columns]
        for r in rows:
            for idx, (key, _title) in enumerate(columns):
                widths[idx] = max(widths[idx], len(_xml_safe_text(r.get(key, ""))))

        for idx, chars in enumerate(widths, start=1):
            width_cm = max(3.0, min(chars * 0.12, 24.0))
            col_style = _insert_automatic_style(
                doc,
                Style(
                    "table-column",
                    name=_make_style_name("col", sheet_name, suffix=str(idx)),
                    area="table-column",
                    width=f"{width_cm:.2f}cm",
                ),
            )
            table.append(Column(style=col_style.name) if col_style is not None else Column())

        header = Row()
        for _key, title in columns:
            cell = Cell(text=title)
            if header_style is not None:
                cell.style = header_style.name
            header.append_cell(cell)
        table.append_row(header)

        for r in rows:
            row = Row()
            for key, _title in columns:
                if key in _NUMERIC_KEYS:
                    row.append_cell(Cell(value=int(r.get(key, 0))))
                else:
                    row.append_cell(Cell(text=_xml_safe_text(r.get(key, ""))))
            table.append_row(row)

        doc.body.append(table)
