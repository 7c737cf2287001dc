"""Deterministic source file discovery by include/exclude globs."""

from __future__ import annotations

import fnmatch
import os
import re
from dataclasses import dataclass
from pathlib import Path

_BINARY_SNIFF_BYTES = 4096
_BRACE_RE = re.compile(r"\{([^{}]*)\}")


@dataclass(slots=True, frozen=True)
class DiscoveredFile:
    """Source file selected for loading."""

    relative_path: str
    full_path: Path


def expand_braces(pattern: str) -> tuple[str, ...]:
    """Expand ``{a,b}`` alternatives, which fnmatch does not support."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return (pattern,)
    head = pattern[: match.start()]
    tail = pattern[match.end() :]
    output: list[str] = []
    for option in match.group(1).split(","):
        for expanded in expand_braces(f"{head}{option}{tail}"):
            if expanded not in output:
                output.append(expanded)
    return tuple(output)


def matches_any_glob(relative_path: str, globs: tuple[str, ...]) -> bool:
    """Return True when a root-relative POSIX path matches any glob."""
    anchored = f"/{relative_path}"
    return any(
        fnmatch.fnmatchcase(relative_path, pattern) or fnmatch.fnmatchcase(anchored, pattern)
        for pattern in globs
    )


def discover_source_files(
    root: Path,
    include_globs: tuple[str, ...],
    exclude_globs: tuple[str, ...],
) -> list[DiscoveredFile]:
    """Walk ``root`` and return matching text files sorted by relative path."""
    resolved_root = root.resolve()
    includes = tuple(item for pattern in include_globs for item in expand_braces(pattern))
    excludes = tuple(item for pattern in exclude_globs for item in expand_braces(pattern))
    excluded_dir_names = _excluded_dir_names(excludes)

    found: list[DiscoveredFile] = []
    stack: list[Path] = [resolved_root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError:
            continue
        for entry in reversed(ordered_entries):
            full_path = Path(entry.path)
            relative = full_path.relative_to(resolved_root).as_posix()
            if entry.is_dir(follow_symlinks=False):
                if entry.name in excluded_dir_names and matches_any_glob(
                    f"{relative}/", excludes
                ):
                    continue
                stack.append(full_path)
                continue
            if not entry.is_file(follow_symlinks=False):
                continue
            if matches_any_glob(relative, excludes):
                continue
            if not matches_any_glob(relative, includes):
                continue
            if is_binary_file(full_path):
                continue
            found.append(DiscoveredFile(relative_path=relative, full_path=full_path))
    found.sort(key=lambda item: item.relative_path)
    return found


def is_binary_file(path: Path) -> bool:
    """Treat a file as binary only when its leading bytes contain NUL."""
    with path.open("rb") as handle:
        sample = handle.read(_BINARY_SNIFF_BYTES)
    return b"\x00" in sample


def _excluded_dir_names(exclude_globs: tuple[str, ...]) -> set[str]:
    """Extract directory-name prunes from **/name/** glob patterns."""
    output: set[str] = set()
    for pattern in exclude_globs:
        if not pattern.startswith("**/") or not pattern.endswith("/**"):
            continue
        name = pattern[3:-3].strip("/")
        if not name:
            continue
        if any(char in name for char in "*?[]{}"):
            continue
        output.add(name)
    return output
