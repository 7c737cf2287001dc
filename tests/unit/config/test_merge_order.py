from __future__ import annotations

from pathlib import Path

from index_renamer.config import (
    DEFAULT_INCLUDE_GLOBS,
    CliOverrides,
    default_config,
    load_effective_config,
)


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)

    assert config == default_config(tmp_path)
    assert config.sources.include_globs == DEFAULT_INCLUDE_GLOBS
    assert config.rename.standard_extensions == ("ts", "tsx", "js", "jsx")
    assert config.rename.fallback_extension == ".tsx"
    assert config.rename.rewrite_kinds == ("import",)
    assert config.journal_path is None


def test_merge_order_defaults_then_file_then_cli(tmp_path: Path) -> None:
    (tmp_path / "index_renamer.toml").write_text(
        "\n".join(
            [
                "[sources]",
                'exclude_globs = ["**/dist/**"]',
                "",
                "[rename]",
                'rewrite_kinds = ["import", "export"]',
                "",
                "[journal]",
                'path = ".index_renamer/journal.jsonl"',
            ]
        ),
        encoding="utf-8",
    )
    override = tmp_path / "elsewhere.jsonl"

    from_file = load_effective_config(tmp_path)
    with_cli = load_effective_config(tmp_path, CliOverrides(journal_path=override))

    assert from_file.sources.exclude_globs == ("**/dist/**",)
    assert from_file.sources.include_globs == DEFAULT_INCLUDE_GLOBS
    assert from_file.rename.rewrite_kinds == ("import", "export")
    assert from_file.journal_path == (tmp_path / ".index_renamer" / "journal.jsonl").resolve()
    assert with_cli.journal_path == override.resolve()
