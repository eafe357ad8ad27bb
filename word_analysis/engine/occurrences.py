# Word Analysis
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Case-insensitive substring counting."""


def count_occurrences(text: str, term: str, *, overlapping: bool = True) -> int:
    """
    Count occurrences of a term in a text, ignoring case.

    Matching is plain substring matching, so the term is also found inside
    longer words.

    Args:
        text:
            Text to search.
        term:
            Query term. Must contain a non-whitespace character.
        overlapping:
            If True, scanning resumes one character after each match start,
            so `"aa"` is found twice in `"aaa"`. If False, scanning resumes
            after the match end.

    Returns:
        Number of matches.

    Raises:
        ValueError:
            If the term is empty or whitespace only.
    """

    if not term or not term.strip():
        raise ValueError("Search term must not be empty")

    haystack = text.lower()
    needle = term.lower()
    step = 1 if overlapping else len(needle)

    count = 0
    pos = haystack.find(needle)
    while pos != -1:
        count += 1
        pos = haystack.find(needle, pos + step)

    return count
