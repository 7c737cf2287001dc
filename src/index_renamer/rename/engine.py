"""Rename index files and rewrite the specifiers that resolve to them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from index_renamer.config import (
    DEFAULT_FALLBACK_EXTENSION,
    DEFAULT_REWRITE_KINDS,
    DEFAULT_STANDARD_EXTENSIONS,
    RenameRules,
)
from index_renamer.errors import RenameAbortedError, RenameCollisionError
from index_renamer.logging import JsonlMigrationJournal
from index_renamer.project import SourceFile, SourceProject
from index_renamer.rename.naming import (
    derive_new_path,
    is_standard_index_name,
    rewrite_specifier,
    select_index_files,
)

DEFAULT_RULES = RenameRules(
    standard_extensions=DEFAULT_STANDARD_EXTENSIONS,
    fallback_extension=DEFAULT_FALLBACK_EXTENSION,
    rewrite_kinds=DEFAULT_REWRITE_KINDS,
)


@dataclass(slots=True, frozen=True)
class SpecifierRewrite:
    """One specifier edit made in a referring file."""

    path: Path
    line: int
    kind: str
    before: str
    after: str


@dataclass(slots=True, frozen=True)
class Migration:
    """A completed rename plus the referrer edits it caused."""

    source: Path
    target: Path
    standard: bool
    rewrites: tuple[SpecifierRewrite, ...]


@dataclass(slots=True, frozen=True)
class RenameReport:
    """Outcome of one rename pass."""

    migrations: tuple[Migration, ...]
    skipped: tuple[Path, ...]
    dry_run: bool

    @property
    def rewrite_count(self) -> int:
        return sum(len(item.rewrites) for item in self.migrations)


MigrationCallback = Callable[[Migration], None]
SelectionCallback = Callable[[list[SourceFile]], None]


def rename_index_files(
    project: SourceProject,
    target_folder: str,
    rules: RenameRules = DEFAULT_RULES,
    *,
    dry_run: bool = False,
    journal: JsonlMigrationJournal | None = None,
    on_selected: SelectionCallback | None = None,
    on_migration: MigrationCallback | None = None,
) -> RenameReport:
    """Rename every selected index file, one at a time, in load order.

    Each file is one unit: rename on disk, move in memory, then rewrite the
    specifiers that resolved to it. The first failure stops the pass and is
    re-raised as :class:`RenameAbortedError` listing the completed units.
    Edited text is not written here; call ``project.save()`` afterwards.
    """
    selected = select_index_files(project.source_files(), target_folder)
    if on_selected is not None:
        on_selected(selected)
    if journal is not None:
        journal.record(
            "run_started",
            target_folder=target_folder,
            selected=len(selected),
            dry_run=dry_run,
        )

    migrations: list[Migration] = []
    skipped: list[Path] = []
    for source_file in selected:
        try:
            migration = _migrate(project, source_file, rules, dry_run=dry_run, journal=journal)
        except Exception as error:
            if journal is not None:
                journal.record(
                    "run_failed",
                    path=source_file.path,
                    error_type=type(error).__name__,
                    message=str(error),
                    completed=len(migrations),
                )
            raise RenameAbortedError(
                f"Renaming {source_file.path} failed: {error}",
                completed=tuple(migrations),
            ) from error
        if migration is None:
            skipped.append(source_file.path)
            continue
        migrations.append(migration)
        if on_migration is not None:
            on_migration(migration)

    return RenameReport(
        migrations=tuple(migrations),
        skipped=tuple(skipped),
        dry_run=dry_run,
    )


def _migrate(
    project: SourceProject,
    source_file: SourceFile,
    rules: RenameRules,
    *,
    dry_run: bool,
    journal: JsonlMigrationJournal | None,
) -> Migration | None:
    old_path = source_file.path
    new_path = derive_new_path(old_path, rules.fallback_extension)
    if new_path == old_path:
        # Directory named "index": the file already carries its derived name.
        return None
    if new_path.exists() or project.get_source_file(new_path) is not None:
        raise RenameCollisionError(old_path, new_path)

    standard = is_standard_index_name(old_path.name, rules.standard_extensions)
    referrers = project.referencing_declarations(source_file) if standard else []

    if not dry_run:
        old_path.rename(new_path)
    project.move_file(source_file, new_path)
    if journal is not None:
        journal.record("renamed", path=old_path, target=new_path, standard=standard)

    parent_name = old_path.parent.name
    rewrites: list[SpecifierRewrite] = []
    for declaration in referrers:
        if declaration.kind not in rules.rewrite_kinds:
            continue
        before = declaration.specifier
        after = rewrite_specifier(before, parent_name)
        declaration.set_specifier(after)
        rewrite = SpecifierRewrite(
            path=declaration.source_file.path,
            line=declaration.line,
            kind=declaration.kind,
            before=before,
            after=after,
        )
        rewrites.append(rewrite)
        if journal is not None:
            journal.record(
                "specifier_rewritten",
                path=rewrite.path,
                target=new_path,
                line=rewrite.line,
                before=before,
                after=after,
            )
    return Migration(
        source=old_path,
        target=new_path,
        standard=standard,
        rewrites=tuple(rewrites),
    )
