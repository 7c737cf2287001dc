"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass
from pathlib import Path

from index_renamer.errors import ConfigurationError

CONFIG_FILE_NAME = "index_renamer.toml"

DECLARATION_KINDS = ("import", "export", "require", "dynamic_import")

DEFAULT_INCLUDE_GLOBS = (
    "**/*.{ts,tsx,js,jsx}",
    "**/*.test.{ts,tsx,js,jsx}",
    "**/*.tests.{ts,tsx,js,jsx}",
)
DEFAULT_EXCLUDE_GLOBS = ("**/node_modules/**", "**/.git/**")
DEFAULT_STANDARD_EXTENSIONS = ("ts", "tsx", "js", "jsx")
DEFAULT_FALLBACK_EXTENSION = ".tsx"
DEFAULT_REWRITE_KINDS = ("import",)
DEFAULT_RESOLVE_EXTENSIONS = (".ts", ".tsx", ".d.ts", ".js", ".jsx")

_EXTENSION_NAME_RE = re.compile(r"^[A-Za-z0-9]+$")
_SUFFIX_RE = re.compile(r"^(?:\.[A-Za-z0-9]+)+$")


@dataclass(slots=True, frozen=True)
class SourcesConfig:
    """Which files under the context root are loaded."""

    include_globs: tuple[str, ...]
    exclude_globs: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class RenameRules:
    """Index file naming and rewrite rules."""

    standard_extensions: tuple[str, ...]
    fallback_extension: str
    rewrite_kinds: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class ResolveConfig:
    """Module resolution settings."""

    extensions: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class RenamerConfig:
    """Fully merged configuration."""

    context_root: Path
    sources: SourcesConfig
    rename: RenameRules
    resolve: ResolveConfig
    journal_path: Path | None


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    journal_path: Path | None = None


def default_config(context_root: Path) -> RenamerConfig:
    """Build default config for a module-context root."""
    return RenamerConfig(
        context_root=context_root.resolve(),
        sources=SourcesConfig(
            include_globs=DEFAULT_INCLUDE_GLOBS,
            exclude_globs=DEFAULT_EXCLUDE_GLOBS,
        ),
        rename=RenameRules(
            standard_extensions=DEFAULT_STANDARD_EXTENSIONS,
            fallback_extension=DEFAULT_FALLBACK_EXTENSION,
            rewrite_kinds=DEFAULT_REWRITE_KINDS,
        ),
        resolve=ResolveConfig(extensions=DEFAULT_RESOLVE_EXTENSIONS),
        journal_path=None,
    )


def load_config_file(context_root: Path) -> dict[str, object]:
    """Load optional index_renamer.toml from the context root."""
    config_path = context_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        try:
            payload = tomllib.load(handle)
        except tomllib.TOMLDecodeError as error:
            raise ConfigurationError(f"{CONFIG_FILE_NAME} is not valid TOML: {error}") from error
    return payload


def merge_config(
    base: RenamerConfig, payload: dict[str, object], overrides: CliOverrides
) -> RenamerConfig:
    """Merge defaults, config file, then CLI overrides."""
    sources_payload = _get_table(payload, "sources")
    rename_payload = _get_table(payload, "rename")
    resolve_payload = _get_table(payload, "resolve")
    journal_payload = _get_table(payload, "journal")

    include_globs = base.sources.include_globs
    if "include_globs" in sources_payload:
        include_globs = _tuple_of_strings(
            sources_payload["include_globs"], "sources", "include_globs"
        )
        if not include_globs:
            raise ConfigurationError("Config field 'sources.include_globs' must not be empty.")
    exclude_globs = base.sources.exclude_globs
    if "exclude_globs" in sources_payload:
        exclude_globs = _tuple_of_strings(
            sources_payload["exclude_globs"], "sources", "exclude_globs"
        )

    standard_extensions = base.rename.standard_extensions
    if "standard_extensions" in rename_payload:
        standard_extensions = _tuple_of_strings(
            rename_payload["standard_extensions"], "rename", "standard_extensions"
        )
        for item in standard_extensions:
            if not _EXTENSION_NAME_RE.match(item):
                raise ConfigurationError(
                    "Config field 'rename.standard_extensions' must contain bare extension "
                    f"names such as 'ts'; got '{item}'."
                )

    fallback_extension = base.rename.fallback_extension
    if "fallback_extension" in rename_payload:
        raw_fallback = rename_payload["fallback_extension"]
        if not isinstance(raw_fallback, str) or not _SUFFIX_RE.match(raw_fallback):
            raise ConfigurationError(
                "Config field 'rename.fallback_extension' must be a suffix such as '.tsx'."
            )
        fallback_extension = raw_fallback

    rewrite_kinds = base.rename.rewrite_kinds
    if "rewrite_kinds" in rename_payload:
        rewrite_kinds = _tuple_of_strings(rename_payload["rewrite_kinds"], "rename", "rewrite_kinds")
        unknown = sorted(set(rewrite_kinds) - set(DECLARATION_KINDS))
        if unknown:
            raise ConfigurationError(
                f"Config field 'rename.rewrite_kinds' has unknown kinds: {', '.join(unknown)}."
            )

    resolve_extensions = base.resolve.extensions
    if "extensions" in resolve_payload:
        resolve_extensions = _tuple_of_strings(
            resolve_payload["extensions"], "resolve", "extensions"
        )
        for item in resolve_extensions:
            if not _SUFFIX_RE.match(item):
                raise ConfigurationError(
                    f"Config field 'resolve.extensions' must contain suffixes; got '{item}'."
                )

    journal_path = base.journal_path
    if "path" in journal_payload:
        raw_journal = journal_payload["path"]
        if not isinstance(raw_journal, str) or not raw_journal:
            raise ConfigurationError("Config field 'journal.path' must be a non-empty string.")
        journal_path = base.context_root / raw_journal

    merged = RenamerConfig(
        context_root=base.context_root,
        sources=SourcesConfig(include_globs=include_globs, exclude_globs=exclude_globs),
        rename=RenameRules(
            standard_extensions=standard_extensions,
            fallback_extension=fallback_extension,
            rewrite_kinds=rewrite_kinds,
        ),
        resolve=ResolveConfig(extensions=resolve_extensions),
        journal_path=journal_path,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: RenamerConfig, overrides: CliOverrides) -> RenamerConfig:
    """Apply startup overrides at highest precedence."""
    journal_path = overrides.journal_path or config.journal_path
    return RenamerConfig(
        context_root=config.context_root,
        sources=config.sources,
        rename=config.rename,
        resolve=config.resolve,
        journal_path=journal_path.resolve() if journal_path is not None else None,
    )


def load_effective_config(
    context_root: Path, overrides: CliOverrides | None = None
) -> RenamerConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = context_root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ConfigurationError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigurationError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigurationError(
                f"Config field '{section}.{field}' must contain only strings."
            )
        output.append(item)
    return tuple(output)
