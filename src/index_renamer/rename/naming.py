"""Index file selection, name derivation and specifier rewriting rules."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

from index_renamer.config import DEFAULT_FALLBACK_EXTENSION, DEFAULT_STANDARD_EXTENSIONS
from index_renamer.project.models import SourceFile

INDEX_PREFIX = "index."
EXPLICIT_INDEX_SUFFIX = "/index"

_PATTERN_INDEX_RE = re.compile(r"^index(\..+\.)([^.]+)$")
_SIMPLE_INDEX_RE = re.compile(r"^index(\.[^.]+)$")
_EXPLICIT_INDEX_FILE_RE = re.compile(r"(^|/)index(\.[^./]+)$")


def normalize_path(value: str) -> str:
    """Convert backslashes to forward slashes."""
    return value.replace("\\", "/")


def is_index_file_name(file_name: str) -> bool:
    return file_name.startswith(INDEX_PREFIX)


def select_index_files(files: Iterable[SourceFile], target_folder: str) -> list[SourceFile]:
    """Keep index files whose normalized path contains ``target_folder``.

    Membership is a plain substring test on the normalized absolute path, so
    ``src`` also matches ``/work/my-src-tools/...``.
    """
    needle = normalize_path(target_folder)
    return [
        item
        for item in files
        if needle in normalize_path(str(item.path)) and is_index_file_name(item.path.name)
    ]


def derive_extension(file_name: str, fallback_extension: str = DEFAULT_FALLBACK_EXTENSION) -> str:
    """Return the suffix that follows ``index`` (``.test.ts``, ``.ts``, or the fallback)."""
    pattern_match = _PATTERN_INDEX_RE.match(file_name)
    if pattern_match is not None:
        return pattern_match.group(1) + pattern_match.group(2)
    simple_match = _SIMPLE_INDEX_RE.match(file_name)
    if simple_match is not None:
        return simple_match.group(1)
    return fallback_extension


def derive_new_path(path: Path, fallback_extension: str = DEFAULT_FALLBACK_EXTENSION) -> Path:
    """Return ``<dir>/<parentName><extension>`` for an index file path."""
    directory = path.parent
    return directory / f"{directory.name}{derive_extension(path.name, fallback_extension)}"


def is_standard_index_name(
    file_name: str, standard_extensions: tuple[str, ...] = DEFAULT_STANDARD_EXTENSIONS
) -> bool:
    """Return True for exactly ``index.<ext>`` with a recognised extension."""
    if not is_index_file_name(file_name):
        return False
    return file_name[len(INDEX_PREFIX) :] in standard_extensions


def rewrite_specifier(specifier: str, parent_name: str) -> str:
    """Point a specifier that resolved to ``<parent>/index.*`` at ``<parent>/<parent>``.

    ``./Button/index`` becomes ``./Button/Button`` and ``./Button`` becomes
    ``./Button/Button``. An explicit ``index.<ext>`` keeps its extension.
    """
    if specifier.endswith(EXPLICIT_INDEX_SUFFIX):
        return f"{specifier[: -len(EXPLICIT_INDEX_SUFFIX)]}/{parent_name}"
    trimmed = specifier.rstrip("/")
    explicit_file = _EXPLICIT_INDEX_FILE_RE.search(specifier)
    # A directory such as `index.v2` is the parent itself, not an explicit file.
    if explicit_file is not None and trimmed.rsplit("/", 1)[-1] != parent_name:
        head = specifier[: explicit_file.start()] + explicit_file.group(1)
        return f"{head}{parent_name}{explicit_file.group(2)}"
    return f"{trimmed}/{parent_name}"
