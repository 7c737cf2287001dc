"""In-memory source project: load, resolve, back-reference, move and save."""

from __future__ import annotations

from pathlib import Path

from index_renamer.config import DEFAULT_RESOLVE_EXTENSIONS, SourcesConfig
from index_renamer.errors import RenameCollisionError
from index_renamer.project.discovery import discover_source_files
from index_renamer.project.models import ImportDeclaration, SourceFile
from index_renamer.project.resolver import ModuleResolver
from index_renamer.project.scanner import scan_specifiers
from index_renamer.project.tsconfig import TsConfig, load_tsconfig


class SourceProject:
    """Loaded source files plus a resolved-target back-reference index.

    Every declaration is resolved once when references are built; the index
    maps each target path to the declarations that resolve to it and is
    re-keyed by :meth:`move_file`.
    """

    def __init__(
        self,
        context_root: Path,
        tsconfig: TsConfig,
        resolve_extensions: tuple[str, ...] = DEFAULT_RESOLVE_EXTENSIONS,
    ) -> None:
        self._context_root = context_root.resolve()
        self._tsconfig = tsconfig
        self._files: dict[Path, SourceFile] = {}
        self._order: list[SourceFile] = []
        self._referrers: dict[Path, list[ImportDeclaration]] = {}
        self._resolver = ModuleResolver(tsconfig, self._files, resolve_extensions)

    @property
    def context_root(self) -> Path:
        return self._context_root

    @property
    def tsconfig(self) -> TsConfig:
        return self._tsconfig

    def add_source_file(self, path: Path, text: str) -> SourceFile:
        """Parse and register one file; call :meth:`build_references` afterwards."""
        resolved = path.resolve()
        if resolved in self._files:
            raise ValueError(f"Source file already loaded: {resolved}")
        source_file = SourceFile(path=resolved, text=text, original_text=text)
        for match in scan_specifiers(text):
            source_file.declarations.append(
                ImportDeclaration(
                    source_file=source_file,
                    kind=match.kind,
                    specifier=match.specifier,
                    start=match.start,
                    end=match.end,
                    line=match.line,
                )
            )
        self._files[resolved] = source_file
        self._order.append(source_file)
        return source_file

    def build_references(self) -> None:
        """Resolve every declaration and rebuild the back-reference index."""
        self._referrers = {}
        for source_file in self._order:
            for declaration in source_file.declarations:
                declaration.resolved_path = self.resolve_specifier(
                    declaration.specifier, source_file.path
                )
                if declaration.resolved_path is not None:
                    self._referrers.setdefault(declaration.resolved_path, []).append(declaration)

    def source_files(self) -> list[SourceFile]:
        """Return loaded files in stable load order."""
        return list(self._order)

    def get_source_file(self, path: Path) -> SourceFile | None:
        return self._files.get(path.resolve())

    def resolve_specifier(self, specifier: str, from_path: Path) -> Path | None:
        return self._resolver.resolve(specifier, from_path)

    def resolve(self, declaration: ImportDeclaration) -> SourceFile | None:
        """Return the loaded file a declaration resolved to, if any."""
        if declaration.resolved_path is None:
            return None
        return self._files.get(declaration.resolved_path)

    def referencing_declarations(self, source_file: SourceFile) -> list[ImportDeclaration]:
        """Return declarations in other files that resolve to ``source_file``."""
        return [
            declaration
            for declaration in self._referrers.get(source_file.path, [])
            if declaration.source_file is not source_file
        ]

    def referencing_source_files(self, source_file: SourceFile) -> list[SourceFile]:
        """Return distinct referring files in load order."""
        referring = {id(item.source_file) for item in self.referencing_declarations(source_file)}
        return [item for item in self._order if id(item) in referring]

    def move_file(self, source_file: SourceFile, new_path: Path) -> None:
        """Move a file in memory after it has been renamed on disk."""
        old_path = source_file.path
        target = new_path.resolve()
        if target in self._files:
            raise RenameCollisionError(old_path, target)
        del self._files[old_path]
        source_file.path = target
        self._files[target] = source_file
        referrers = self._referrers.pop(old_path, [])
        for declaration in referrers:
            declaration.resolved_path = target
        if referrers:
            self._referrers[target] = referrers

    def modified_files(self) -> list[SourceFile]:
        return [item for item in self._order if item.is_modified]

    def save(self) -> list[Path]:
        """Write every edited file to its current path."""
        saved: list[Path] = []
        for source_file in self.modified_files():
            source_file.save()
            saved.append(source_file.path)
        return saved


def load_project(
    context_root: Path,
    tsconfig_path: Path,
    sources: SourcesConfig,
    resolve_extensions: tuple[str, ...] = DEFAULT_RESOLVE_EXTENSIONS,
) -> SourceProject:
    """Load every matching file under ``context_root`` and resolve its imports."""
    project = SourceProject(
        context_root=context_root,
        tsconfig=load_tsconfig(tsconfig_path),
        resolve_extensions=resolve_extensions,
    )
    for discovered in discover_source_files(
        project.context_root, sources.include_globs, sources.exclude_globs
    ):
        with discovered.full_path.open(
            "r", encoding="utf-8", errors="surrogateescape", newline=""
        ) as handle:
            text = handle.read()
        project.add_source_file(discovered.full_path, text)
    project.build_references()
    return project
