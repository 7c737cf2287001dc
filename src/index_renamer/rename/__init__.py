"""Index file rename-and-rewrite engine."""

from .engine import (
    DEFAULT_RULES,
    Migration,
    RenameReport,
    SpecifierRewrite,
    rename_index_files,
)
from .naming import (
    derive_extension,
    derive_new_path,
    is_index_file_name,
    is_standard_index_name,
    normalize_path,
    rewrite_specifier,
    select_index_files,
)

__all__ = [
    "DEFAULT_RULES",
    "Migration",
    "RenameReport",
    "SpecifierRewrite",
    "derive_extension",
    "derive_new_path",
    "is_index_file_name",
    "is_standard_index_name",
    "normalize_path",
    "rename_index_files",
    "rewrite_specifier",
    "select_index_files",
]
