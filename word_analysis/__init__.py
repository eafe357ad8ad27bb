"""
Word analysis CLI package.

This package contains a small CLI tool that:
- parses episode transcripts (SRT with `[Speaker]` tags),
- locates every occurrence of a query term and attributes it to a speaker,
- extracts readable, de-duplicated context snippets with deep links,
- aggregates per-episode and per-speaker counts into a single report.
"""
