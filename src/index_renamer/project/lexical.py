"""Deterministic lexical masking for JavaScript-family and JSONC text."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class LexicalRules:
    """Configurable lexical markers used while masking non-code text."""

    line_comment_prefixes: tuple[str, ...] = ("//",)
    block_comment_pairs: tuple[tuple[str, str], ...] = (("/*", "*/"),)
    string_delimiters: tuple[str, ...] = ("'", '"', "`")
    escape_char: str = "\\"
    regex_literals: bool = True


JSONC_RULES = LexicalRules(string_delimiters=('"',), regex_literals=False)

# Characters after which a slash starts an expression rather than a division.
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};")
_REGEX_KEYWORDS = frozenset(
    {
        "return",
        "typeof",
        "instanceof",
        "case",
        "do",
        "else",
        "in",
        "of",
        "new",
        "delete",
        "void",
        "throw",
        "yield",
        "await",
    }
)


def mask_comments_and_strings(
    text: str,
    rules: LexicalRules | None = None,
    *,
    keep_strings: bool = False,
) -> str:
    """Mask comments and strings while preserving line count and character offsets.

    With ``keep_strings`` string literals are kept; they are still tracked so
    comment markers inside them are left alone. Regex literals are always
    blanked when the rules enable them.
    """
    active_rules = rules or LexicalRules()
    line_prefixes = tuple(
        sorted(
            (prefix for prefix in active_rules.line_comment_prefixes if prefix),
            key=len,
            reverse=True,
        )
    )
    block_pairs = tuple(
        sorted(
            ((start, end) for start, end in active_rules.block_comment_pairs if start and end),
            key=lambda pair: len(pair[0]),
            reverse=True,
        )
    )
    string_delimiters = tuple(
        sorted(
            (marker for marker in active_rules.string_delimiters if marker),
            key=len,
            reverse=True,
        )
    )

    chars = list(text)
    length = len(text)
    index = 0
    state: tuple[str, str] | None = None
    code_end = 0

    while index < length:
        if state is None:
            line_marker = _match_any(text, index, line_prefixes)
            if line_marker is not None:
                _blank(chars, index, len(line_marker))
                state = ("line_comment", line_marker)
                index += len(line_marker)
                continue

            block_marker = _match_block_start(text, index, block_pairs)
            if block_marker is not None:
                start_marker, end_marker = block_marker
                _blank(chars, index, len(start_marker))
                state = ("block_comment", end_marker)
                index += len(start_marker)
                continue

            if (
                active_rules.regex_literals
                and text[index] == "/"
                and _regex_allowed(text, code_end)
            ):
                regex_end = _regex_literal_end(text, index)
                if regex_end is not None:
                    _blank(chars, index, regex_end - index)
                    index = regex_end
                    code_end = regex_end
                    continue

            string_marker = _match_any(text, index, string_delimiters)
            if string_marker is not None:
                if not keep_strings:
                    _blank(chars, index, len(string_marker))
                state = ("string", string_marker)
                index += len(string_marker)
                continue

            if not text[index].isspace():
                code_end = index + 1
            index += 1
            continue

        mode, marker = state
        if mode == "line_comment":
            if text[index] == "\n":
                state = None
            else:
                chars[index] = " "
            index += 1
            continue

        if mode == "block_comment":
            if text.startswith(marker, index):
                _blank(chars, index, len(marker))
                state = None
                index += len(marker)
            else:
                if text[index] != "\n":
                    chars[index] = " "
                index += 1
            continue

        # string
        if text.startswith(marker, index) and not _is_escaped(
            text, index, active_rules.escape_char
        ):
            if not keep_strings:
                _blank(chars, index, len(marker))
            state = None
            index += len(marker)
            code_end = index
            continue
        if marker != "`" and text[index] == "\n":
            # Unterminated single-line string; resume scanning code on the next line.
            state = None
            index += 1
            continue
        if not keep_strings and text[index] != "\n":
            chars[index] = " "
        index += 1

    return "".join(chars)


def is_code_position(masked_text: str, original_text: str, offset: int) -> bool:
    """Return True when ``offset`` survived full masking, i.e. it is live code."""
    if offset < 0 or offset >= len(original_text):
        return False
    char = original_text[offset]
    return not char.isspace() and masked_text[offset] == char


def line_number_at(text: str, offset: int) -> int:
    """Return the 1-based line number of a character offset."""
    return text.count("\n", 0, offset) + 1


def _blank(chars: list[str], start: int, count: int) -> None:
    for offset in range(count):
        chars[start + offset] = " "


def _match_any(text: str, index: int, markers: tuple[str, ...]) -> str | None:
    for marker in markers:
        if text.startswith(marker, index):
            return marker
    return None


def _match_block_start(
    text: str,
    index: int,
    pairs: tuple[tuple[str, str], ...],
) -> tuple[str, str] | None:
    for start, end in pairs:
        if text.startswith(start, index):
            return start, end
    return None


def _is_escaped(text: str, index: int, escape_char: str) -> bool:
    backslashes = 0
    cursor = index - 1
    while cursor >= 0 and text[cursor] == escape_char:
        backslashes += 1
        cursor -= 1
    return backslashes % 2 == 1


def _regex_allowed(text: str, code_end: int) -> bool:
    """Return True when a slash following the code ending at ``code_end`` opens a regex."""
    if code_end == 0:
        return True
    if text[code_end - 1] in _REGEX_PRECEDERS:
        return True
    cursor = code_end - 1
    while cursor >= 0 and (text[cursor].isalnum() or text[cursor] in "_$"):
        cursor -= 1
    return text[cursor + 1 : code_end] in _REGEX_KEYWORDS


def _regex_literal_end(text: str, index: int) -> int | None:
    """Return the offset just past a regex literal and its flags, or None."""
    cursor = index + 1
    in_class = False
    while cursor < len(text):
        char = text[cursor]
        if char == "\n":
            return None
        if char == "\\":
            cursor += 2
            continue
        if in_class:
            if char == "]":
                in_class = False
        elif char == "[":
            in_class = True
        elif char == "/":
            cursor += 1
            while cursor < len(text) and (text[cursor].isalnum() or text[cursor] == "_"):
                cursor += 1
            return cursor
        cursor += 1
    return None
