from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/index_renamer/cli.py",
        "src/index_renamer/config.py",
        "src/index_renamer/errors.py",
        "src/index_renamer/project/__init__.py",
        "src/index_renamer/rename/__init__.py",
        "src/index_renamer/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
