"""Exception types shared by the loader, engine and CLI."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from index_renamer.rename.engine import Migration


class ConfigurationError(ValueError):
    """Raised for fatal pre-flight problems: missing inputs or invalid config."""


class RenameCollisionError(FileExistsError):
    """Raised when the derived name of an index file is already taken."""

    def __init__(self, source: Path, target: Path) -> None:
        super().__init__(f"Cannot rename {source} to {target}: target already exists.")
        self.source = source
        self.target = target


class RenameAbortedError(RuntimeError):
    """Raised when the rename pass stops part way; carries completed migrations."""

    def __init__(self, message: str, completed: tuple[Migration, ...]) -> None:
        super().__init__(message)
        self.completed = completed
