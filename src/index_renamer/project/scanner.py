"""Lexical import-declaration scanner for TypeScript and JavaScript sources."""

from __future__ import annotations

import re
from dataclasses import dataclass

from index_renamer.project.lexical import (
    is_code_position,
    line_number_at,
    mask_comments_and_strings,
)

_BINDING = r"[A-Za-z_$][\w$]*"
_SPECIFIER = r"(['\"])([^'\"\r\n]*)\1"
_IMPORT_CLAUSE = (
    rf"(?:type\s+)?(?:{_BINDING}\s*(?:,\s*)?)?(?:\*\s*as\s+{_BINDING}|\{{[^{{}}]*\}})?"
)
_EXPORT_CLAUSE = rf"(?:type\s+)?(?:\*(?:\s*as\s+{_BINDING})?|\{{[^{{}}]*\}})"

_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "import",
        re.compile(rf"(?<![\w$.])import(?![\w$])\s*{_IMPORT_CLAUSE}\s*from\s*{_SPECIFIER}"),
    ),
    ("import", re.compile(rf"(?<![\w$.])import\s*{_SPECIFIER}")),
    ("dynamic_import", re.compile(rf"(?<![\w$.])import\s*\(\s*{_SPECIFIER}\s*\)")),
    (
        "export",
        re.compile(rf"(?<![\w$.])export(?![\w$])\s*{_EXPORT_CLAUSE}\s*from\s*{_SPECIFIER}"),
    ),
    ("require", re.compile(rf"(?<![\w$.])require\s*\(\s*{_SPECIFIER}\s*\)")),
)


@dataclass(slots=True, frozen=True)
class SpecifierMatch:
    """Located module specifier with character offsets into the original text."""

    kind: str
    specifier: str
    start: int
    end: int
    line: int


def scan_specifiers(text: str) -> list[SpecifierMatch]:
    """Find module specifiers in live code, ordered by position.

    Comments are blanked before matching; a match only counts when its keyword
    is live code, so import-like text inside strings or templates is ignored.
    """
    comment_masked = mask_comments_and_strings(text, keep_strings=True)
    fully_masked = mask_comments_and_strings(text)
    found: dict[int, SpecifierMatch] = {}
    for kind, pattern in _PATTERNS:
        for match in pattern.finditer(comment_masked):
            if not is_code_position(fully_masked, text, match.start()):
                continue
            start, end = match.span(2)
            if start in found:
                continue
            found[start] = SpecifierMatch(
                kind=kind,
                specifier=text[start:end],
                start=start,
                end=end,
                line=line_number_at(text, match.start()),
            )
    return [found[key] for key in sorted(found)]
