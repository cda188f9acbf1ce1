"""Prerequisite text segmentation and dedupe keys.

Prerequisite previews are free-form blocks that mix several definitions and
notations without structured delimiters. ``segment`` splits them into items
using a header heuristic tuned to the source documents: a line that opens with
a short run (at most ~80 characters, optionally a ``$...$`` math span) followed
by a colon starts a new item. False positives and negatives of this pattern are
accepted imprecision.
"""

import re

LABEL_RE = re.compile(r"\\label\{[^}]*\}")
PARAGRAPH_RE = re.compile(r"\n\s*\n+")
HEADER_RE = re.compile(r"^\s*(?:\$[^$]{0,80}\$|[A-Za-z\\][^:\n\r]{0,80}):")
WHITESPACE_RE = re.compile(r"\s+")
TRAILING_SPACE_RE = re.compile(r"\s+\n")


def clean_markup(text: str | None) -> str:
    """Strip ``\\label{...}`` markers and surrounding whitespace."""
    if not text:
        return ""
    return LABEL_RE.sub("", text).strip()


def dedupe_key(text: str | None) -> str:
    """Normalized key used to detect repeated definitions."""
    return WHITESPACE_RE.sub(" ", clean_markup(text)).strip().lower()


def is_header_line(line: str) -> bool:
    return HEADER_RE.match(line) is not None


def segment(text: str | None) -> list[str]:
    """Split a free-form prerequisite block into discrete items."""
    if not text:
        return []
    normalized = str(text).replace("\r\n", "\n").strip()
    if not normalized:
        return []

    items: list[str] = []
    for paragraph in PARAGRAPH_RE.split(normalized):
        current: list[str] = []
        for line in paragraph.split("\n"):
            if is_header_line(line) and "\n".join(current).strip():
                _flush(current, items)
                current = [line]
            else:
                current.append(line)
        _flush(current, items)
    return items


def _flush(lines: list[str], items: list[str]) -> None:
    cleaned = TRAILING_SPACE_RE.sub("\n", clean_markup("\n".join(lines))).strip()
    if cleaned:
        items.append(cleaned)


def dedupe(items: list[str], seen: set[str] | None = None) -> list[str]:
    """Keep the first occurrence of each dedupe key, preserving order.

    ``seen`` is updated in place so callers can dedupe across several batches.
    """
    if seen is None:
        seen = set()
    kept: list[str] = []
    for item in items:
        key = dedupe_key(item)
        if key and key not in seen:
            seen.add(key)
            kept.append(item)
    return kept
