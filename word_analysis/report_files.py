# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Saved report files.

Each analyzed term is written to `<outdir>/<slug>.json` (or `.yaml`), where the
slug is a filesystem-friendly form of the term, unique per term.
"""

import hashlib
import json
from pathlib import Path

from word_analysis.config import ConfigError
from word_analysis.engine.models import Report
from word_analysis.yaml_io import dump_yaml, read_yaml_mapping


REPORT_FORMATS = ("json", "yaml")

_REPORT_SUFFIXES = (".json", ".yaml", ".yml")


def report_slug(term: str) -> str:
    """
    Return a filesystem-friendly name for a term (any alphabet is kept).

    Terms that need character replacement get a short hash suffix, so `"a b"`,
    `"a.b"` and `"a_b"` map to different files.
    """

    term = term.strip()
    safe = "".join(ch if ch.isalnum() or ch in {"-", "_"} else "_" for ch in term)
    slug = safe.strip("_") or "term"
    if slug == term:
        return slug

    digest = hashlib.md5(term.encode("utf-8"), usedforsecurity=False).hexdigest()
    return f"{slug}-{digest[:8]}"


def render_report(report: Report, fmt: str = "json") -> str:
    """Serialize a report as JSON or YAML text."""

    payload = report.to_dict()
    if fmt == "yaml":
        return dump_yaml(payload)
    if fmt == "json":
        return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"
    raise ValueError(f"Unsupported report format: {fmt}")


def save_report(report: Report, outdir: Path, fmt: str = "json") -> Path:
    """Write a report into `outdir` and return the file path."""

    outdir.mkdir(parents=True, exist_ok=True)
    path = outdir / f"{report_slug(report.word)}.{fmt}"
    path.write_text(render_report(report, fmt), encoding="utf-8")
    return path


def load_report(path: Path) -> Report:
    """Load a saved report file."""

    return Report.from_dict(read_yaml_mapping(path))


def find_report_files(outdir: Path, terms: list[str] | None = None) -> list[Path]:
    """
    Locate saved report files.

    Args:
        outdir:
            Report directory.
        terms:
            Optional terms to restrict the result to. If omitted, every report
            file in `outdir` is returned.

    Returns:
        Sorted report paths.

    Raises:
        ConfigError:
            If a requested term has no saved report.
    """

    if not outdir.is_dir():
        return []

    if not terms:
        return sorted(p for p in outdir.iterdir() if p.is_file() and p.suffix.lower() in _REPORT_SUFFIXES)

    paths: list[Path] = []
    for term in terms:
        slug = report_slug(term.strip().lower())
        found = next(
            (outdir / f"{slug}{s}" for s in _REPORT_SUFFIXES if (outdir / f"{slug}{s}").is_file()),
            None,
        )
        if found is None:
            raise ConfigError(f"No saved report for '{term}'. Run the 'analyze' command first.")
        paths.append(found)

    return paths
