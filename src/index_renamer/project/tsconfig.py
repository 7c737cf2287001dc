"""tsconfig.json (JSONC) loading for module resolution settings."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path

from index_renamer.errors import ConfigurationError
from index_renamer.project.lexical import JSONC_RULES, mask_comments_and_strings

_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_MAX_EXTENDS_DEPTH = 16


@dataclass(slots=True, frozen=True)
class TsConfig:
    """Resolution-relevant subset of a tsconfig file."""

    config_path: Path
    base_url: Path | None = None
    paths: dict[str, tuple[str, ...]] = field(default_factory=dict)
    paths_base: Path | None = None


def parse_jsonc(text: str, source: Path) -> dict[str, object]:
    """Parse JSON with comments and trailing commas."""
    stripped = mask_comments_and_strings(text, JSONC_RULES, keep_strings=True)
    stripped = _TRAILING_COMMA_RE.sub(r"\1", stripped)
    try:
        payload = json.loads(stripped)
    except json.JSONDecodeError as error:
        raise ConfigurationError(f"Invalid JSON in {source}: {error}") from error
    if not isinstance(payload, dict):
        raise ConfigurationError(f"{source} must contain a top-level object.")
    return payload


def load_tsconfig(config_path: Path) -> TsConfig:
    """Load baseUrl and paths, following relative ``extends`` chains."""
    resolved = config_path.resolve()
    if not resolved.is_file():
        raise ConfigurationError(f"tsconfig file not found at path: {config_path}")
    return _load(resolved, depth=0)


def _load(config_path: Path, depth: int) -> TsConfig:
    if depth > _MAX_EXTENDS_DEPTH:
        raise ConfigurationError(f"tsconfig extends chain is too deep at {config_path}")
    payload = parse_jsonc(config_path.read_text(encoding="utf-8"), config_path)
    config_dir = config_path.parent

    inherited = TsConfig(config_path=config_path)
    extends = payload.get("extends")
    if isinstance(extends, str) and extends.startswith("."):
        parent_path = (config_dir / extends).resolve()
        if not parent_path.is_file() and parent_path.suffix != ".json":
            parent_path = parent_path.with_name(parent_path.name + ".json")
        if not parent_path.is_file():
            raise ConfigurationError(f"tsconfig extends target not found: {extends}")
        inherited = _load(parent_path, depth + 1)

    compiler_options = payload.get("compilerOptions", {})
    if not isinstance(compiler_options, dict):
        raise ConfigurationError(f"compilerOptions in {config_path} must be an object.")

    base_url = inherited.base_url
    raw_base_url = compiler_options.get("baseUrl")
    if isinstance(raw_base_url, str):
        base_url = (config_dir / raw_base_url).resolve()

    paths = inherited.paths
    paths_base = inherited.paths_base
    raw_paths = compiler_options.get("paths")
    if isinstance(raw_paths, dict):
        paths = {}
        for alias, targets in raw_paths.items():
            if not isinstance(targets, list):
                raise ConfigurationError(
                    f"compilerOptions.paths['{alias}'] in {config_path} must be a list."
                )
            paths[alias] = tuple(target for target in targets if isinstance(target, str))
        paths_base = config_dir

    return TsConfig(
        config_path=config_path,
        base_url=base_url,
        paths=paths,
        paths_base=base_url or paths_base,
    )
