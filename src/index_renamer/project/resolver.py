"""Resolve module specifiers to loaded source files."""

from __future__ import annotations

import os
from collections.abc import Container
from pathlib import Path, PurePosixPath

from index_renamer.config import DEFAULT_RESOLVE_EXTENSIONS
from index_renamer.project.tsconfig import TsConfig


# ESM-style specifiers name the emitted file; the source may be TypeScript.
_EMITTED_TO_SOURCE = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
    ".cjs": (".cts",),
}


def is_relative_specifier(specifier: str) -> bool:
    """Return True for ``./x``, ``../x``, ``.`` and ``..`` specifiers."""
    return specifier in (".", "..") or specifier.startswith(("./", "../"))


class ModuleResolver:
    """Deterministic specifier resolution against a known set of file paths.

    Resolution is purely in-memory: ``known_paths`` is the loaded project, so
    results follow in-memory moves rather than the current disk state.
    """

    def __init__(
        self,
        tsconfig: TsConfig,
        known_paths: Container[Path],
        extensions: tuple[str, ...] = DEFAULT_RESOLVE_EXTENSIONS,
    ) -> None:
        self._tsconfig = tsconfig
        self._known = known_paths
        self._extensions = extensions

    def resolve(self, specifier: str, from_path: Path) -> Path | None:
        """Resolve ``specifier`` written in ``from_path``; None when unresolved."""
        if not specifier:
            return None
        if is_relative_specifier(specifier):
            return self._resolve_candidate(_join(from_path.parent, specifier))
        if specifier.startswith("/"):
            return self._resolve_candidate(_join(Path("/"), specifier))
        mapped = self._resolve_paths_mapping(specifier)
        if mapped is not None:
            return mapped
        if self._tsconfig.base_url is not None:
            return self._resolve_candidate(_join(self._tsconfig.base_url, specifier))
        return None

    def _resolve_paths_mapping(self, specifier: str) -> Path | None:
        base = self._tsconfig.paths_base
        if base is None or not self._tsconfig.paths:
            return None
        best: tuple[int, str, str] | None = None
        for alias in self._tsconfig.paths:
            captured = _match_alias(alias, specifier)
            if captured is None:
                continue
            prefix_length = len(alias.split("*", 1)[0])
            if best is None or prefix_length > best[0]:
                best = (prefix_length, alias, captured)
        if best is None:
            return None
        _, alias, captured = best
        for target in self._tsconfig.paths[alias]:
            candidate = _join(base, target.replace("*", captured, 1))
            resolved = self._resolve_candidate(candidate)
            if resolved is not None:
                return resolved
        return None

    def _resolve_candidate(self, candidate: Path) -> Path | None:
        if candidate in self._known:
            return candidate
        if not candidate.name:
            return None
        for extension in self._extensions:
            with_extension = candidate.with_name(candidate.name + extension)
            if with_extension in self._known:
                return with_extension
        source_extensions = _EMITTED_TO_SOURCE.get(candidate.suffix, ())
        for extension in source_extensions:
            swapped = candidate.with_suffix(extension)
            if swapped in self._known:
                return swapped
        for extension in self._extensions:
            index_file = candidate / f"index{extension}"
            if index_file in self._known:
                return index_file
        return None


def _join(base: Path, specifier: str) -> Path:
    return Path(os.path.normpath(base / PurePosixPath(specifier)))


def _match_alias(alias: str, specifier: str) -> str | None:
    if "*" not in alias:
        return "" if alias == specifier else None
    prefix, suffix = alias.split("*", 1)
    if len(specifier) < len(prefix) + len(suffix):
        return None
    if not specifier.startswith(prefix) or not specifier.endswith(suffix):
        return None
    return specifier[len(prefix) : len(specifier) - len(suffix)]
