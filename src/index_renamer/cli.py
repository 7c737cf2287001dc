"""Command-line entrypoint: rename index files and rewrite their imports."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from index_renamer.config import CliOverrides, load_effective_config
from index_renamer.errors import ConfigurationError, RenameAbortedError
from index_renamer.logging import JsonlMigrationJournal
from index_renamer.project import SourceFile, SourceProject, load_project
from index_renamer.rename import Migration, RenameReport, rename_index_files

DEFAULT_TARGET_FOLDER = "src"
DEFAULT_TSCONFIG = "tsconfig.json"


@dataclass(slots=True, frozen=True)
class RunOptions:
    """Explicit invocation inputs; relative paths are taken from ``working_dir``."""

    target_folder: str
    tsconfig_path: Path
    context_root: Path
    working_dir: Path
    dry_run: bool = False
    journal_path: Path | None = None


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the positional invocation."""
    parser = argparse.ArgumentParser(
        prog="index-renamer",
        description="Rename index.* files after their directory and rewrite imports.",
    )
    parser.add_argument("target_folder", nargs="?", default=DEFAULT_TARGET_FOLDER)
    parser.add_argument("tsconfig", nargs="?", default=DEFAULT_TSCONFIG)
    parser.add_argument("context_root", nargs="?", default=None)
    parser.add_argument("--dry-run", action="store_true", default=False)
    parser.add_argument("--journal", required=False, default=None)
    return parser


def options_from_args(args: argparse.Namespace, working_dir: Path) -> RunOptions:
    """Apply defaults: the context root is the tsconfig directory unless given."""
    tsconfig_path = working_dir / args.tsconfig
    if args.context_root is not None:
        context_root = working_dir / args.context_root
    else:
        context_root = tsconfig_path.parent
    return RunOptions(
        target_folder=args.target_folder,
        tsconfig_path=tsconfig_path,
        context_root=context_root,
        working_dir=working_dir,
        dry_run=args.dry_run,
        journal_path=working_dir / args.journal if args.journal is not None else None,
    )


def check_preconditions(options: RunOptions) -> None:
    """Fail before any mutation when the tsconfig or target folder is missing."""
    if not options.tsconfig_path.exists():
        raise ConfigurationError(f"tsconfig file not found at path: {options.tsconfig_path}")
    if not (options.working_dir / options.target_folder).exists():
        raise ConfigurationError(f"target folder not found at path: {options.target_folder}")


def run_rename(options: RunOptions, out_stream: TextIO) -> RenameReport:
    """Load the project, rename index files, rewrite imports and save edits."""
    config = load_effective_config(
        options.context_root, CliOverrides(journal_path=options.journal_path)
    )
    project = load_project(
        config.context_root,
        options.tsconfig_path,
        config.sources,
        config.resolve.extensions,
    )
    root = project.context_root
    print(f"Found {len(project.source_files())} source files in the project.", file=out_stream)

    journal = JsonlMigrationJournal(config.journal_path) if config.journal_path else None

    def count(selected: list[SourceFile]) -> None:
        print(
            f"Found {len(selected)} index files to rename in the target folder.",
            file=out_stream,
        )

    def announce(migration: Migration) -> None:
        verb = "Would rename" if options.dry_run else "Renamed"
        print(
            f"{verb}: {_display(migration.source, root)} -> {_display(migration.target, root)}"
            f" ({len(migration.rewrites)} imports updated)",
            file=out_stream,
        )

    try:
        report = rename_index_files(
            project,
            options.target_folder,
            config.rename,
            dry_run=options.dry_run,
            journal=journal,
            on_selected=count,
            on_migration=announce,
        )
    except RenameAbortedError:
        # Completed units are consistent on disk once their referrer edits are saved.
        if not options.dry_run:
            _save(project, journal)
        raise

    if not options.dry_run:
        _save(project, journal)
    if journal is not None:
        journal.record(
            "run_completed",
            migrations=len(report.migrations),
            rewrites=report.rewrite_count,
            dry_run=options.dry_run,
        )
    return report


def main(
    argv: list[str] | None = None,
    *,
    out_stream: TextIO | None = None,
    err_stream: TextIO | None = None,
    working_dir: Path | None = None,
) -> int:
    """Entrypoint for the index renamer process."""
    out = out_stream or sys.stdout
    err = err_stream or sys.stderr
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    options = options_from_args(args, working_dir or Path.cwd())

    print(f"Target folder for renaming: {options.target_folder}", file=out)
    print(f"Project folder for TypeScript context: {options.context_root}", file=out)
    print(f"Using tsconfig: {options.tsconfig_path}", file=out)

    try:
        check_preconditions(options)
        report = run_rename(options, out)
    except ConfigurationError as error:
        print(f"Error: {error}", file=err)
        return 1
    except RenameAbortedError as error:
        print(f"An error occurred: {error}", file=err)
        _print_completed(error.completed, options.context_root, err)
        return 1
    except Exception as error:
        print(f"An error occurred: {error}", file=err)
        return 1

    if report.dry_run:
        print(
            f"Dry run: {len(report.migrations)} files would be renamed and "
            f"{report.rewrite_count} imports updated; nothing was written.",
            file=out,
        )
        return 0
    print("All files renamed and imports updated successfully!", file=out)
    return 0


def _save(project: SourceProject, journal: JsonlMigrationJournal | None) -> None:
    for path in project.save():
        if journal is not None:
            journal.record("saved", path=path)


def _print_completed(completed: tuple[Migration, ...], root: Path, err: TextIO) -> None:
    if not completed:
        print("No files were renamed before the failure.", file=err)
        return
    print(f"{len(completed)} files were renamed before the failure:", file=err)
    for migration in completed:
        print(
            f"  {_display(migration.source, root)} -> {_display(migration.target, root)}",
            file=err,
        )


def _display(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root.resolve()).as_posix()
    except ValueError:
        return str(path)


if __name__ == "__main__":
    raise SystemExit(main())
