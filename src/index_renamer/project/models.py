"""Editable source file and import declaration models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True, eq=False)
class ImportDeclaration:
    """One module specifier occurrence inside a source file.

    ``start``/``end`` delimit the specifier text between its quotes and are
    kept current as earlier specifiers in the same file are rewritten.
    """

    source_file: SourceFile = field(repr=False)
    kind: str
    specifier: str
    start: int
    end: int
    line: int
    resolved_path: Path | None = None

    def set_specifier(self, value: str) -> None:
        """Rewrite this specifier in the owning file's text."""
        self.source_file.set_specifier(self, value)


@dataclass(slots=True, eq=False)
class SourceFile:
    """In-memory source text with its scanned import declarations."""

    path: Path
    text: str
    original_text: str
    declarations: list[ImportDeclaration] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_modified(self) -> bool:
        return self.text != self.original_text

    def import_declarations(self, kinds: tuple[str, ...] | None = None) -> list[ImportDeclaration]:
        """Return declarations in text order, optionally filtered by kind."""
        if kinds is None:
            return list(self.declarations)
        return [item for item in self.declarations if item.kind in kinds]

    def set_specifier(self, declaration: ImportDeclaration, value: str) -> None:
        """Splice a new specifier into the text and shift later offsets."""
        if declaration.source_file is not self:
            raise ValueError("Declaration does not belong to this source file.")
        delta = len(value) - (declaration.end - declaration.start)
        self.text = self.text[: declaration.start] + value + self.text[declaration.end :]
        for other in self.declarations:
            if other is not declaration and other.start >= declaration.end:
                other.start += delta
                other.end += delta
        declaration.end = declaration.start + len(value)
        declaration.specifier = value

    def save(self) -> None:
        """Write current text back, keeping original newlines and undecodable bytes."""
        with self.path.open(
            "w", encoding="utf-8", errors="surrogateescape", newline=""
        ) as handle:
            handle.write(self.text)
        self.original_text = self.text
