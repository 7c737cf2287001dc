"""Lexical TypeScript/JavaScript source project model."""

from .discovery import DiscoveredFile, discover_source_files, expand_braces, matches_any_glob
from .lexical import LexicalRules, mask_comments_and_strings
from .loader import SourceProject, load_project
from .models import ImportDeclaration, SourceFile
from .resolver import ModuleResolver, is_relative_specifier
from .scanner import SpecifierMatch, scan_specifiers
from .tsconfig import TsConfig, load_tsconfig, parse_jsonc

__all__ = [
    "DiscoveredFile",
    "ImportDeclaration",
    "LexicalRules",
    "ModuleResolver",
    "SourceFile",
    "SourceProject",
    "SpecifierMatch",
    "TsConfig",
    "discover_source_files",
    "expand_braces",
    "is_relative_specifier",
    "load_project",
    "load_tsconfig",
    "mask_comments_and_strings",
    "matches_any_glob",
    "parse_jsonc",
    "scan_specifiers",
]
