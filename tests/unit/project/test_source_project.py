from __future__ import annotations

from pathlib import Path

import pytest

from index_renamer.config import SourcesConfig
from index_renamer.errors import RenameCollisionError
from index_renamer.project import SourceProject, TsConfig, load_project

SOURCES = SourcesConfig(include_globs=("**/*.{ts,tsx}",), exclude_globs=())


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _tsconfig(root: Path) -> Path:
    config = root / "tsconfig.json"
    config.write_text("{}", encoding="utf-8")
    return config


def test_load_builds_back_references_from_resolution(tmp_path: Path) -> None:
    _write(tmp_path / "app" / "ui" / "Button" / "index.tsx", "export default 1;\n")
    _write(tmp_path / "app" / "App.tsx", "import Button from './ui/Button';\n")
    _write(tmp_path / "app" / "Other.tsx", "import x from './ui/Other/Button';\n")

    project = load_project(tmp_path, _tsconfig(tmp_path), SOURCES)
    button = project.get_source_file(tmp_path / "app" / "ui" / "Button" / "index.tsx")
    assert button is not None

    referring = project.referencing_source_files(button)

    assert [item.path.name for item in referring] == ["App.tsx"]
    (declaration,) = project.referencing_declarations(button)
    assert declaration.specifier == "./ui/Button"
    assert project.resolve(declaration) is button


def test_set_specifier_shifts_later_offsets(tmp_path: Path) -> None:
    project = SourceProject(tmp_path, TsConfig(config_path=tmp_path / "tsconfig.json"))
    source = project.add_source_file(
        tmp_path / "a.ts",
        "import a from './a1';\nimport b from './b1';\n",
    )
    first, second = source.import_declarations()

    first.set_specifier("./a1/a1")
    second.set_specifier("./b1/b1")

    assert source.text == "import a from './a1/a1';\nimport b from './b1/b1';\n"
    assert source.is_modified
    assert source.text[second.start : second.end] == "./b1/b1"


def test_move_file_rekeys_back_references(tmp_path: Path) -> None:
    project = SourceProject(tmp_path, TsConfig(config_path=tmp_path / "tsconfig.json"))
    index = project.add_source_file(tmp_path / "Card" / "index.ts", "export {};\n")
    app = project.add_source_file(tmp_path / "app.ts", "import c from './Card';\n")
    project.build_references()

    project.move_file(index, tmp_path / "Card" / "Card.ts")

    assert project.get_source_file(tmp_path / "Card" / "index.ts") is None
    assert project.get_source_file(tmp_path / "Card" / "Card.ts") is index
    assert project.referencing_source_files(index) == [app]


def test_move_file_onto_loaded_path_is_a_collision(tmp_path: Path) -> None:
    project = SourceProject(tmp_path, TsConfig(config_path=tmp_path / "tsconfig.json"))
    index = project.add_source_file(tmp_path / "Card" / "index.ts", "export {};\n")
    project.add_source_file(tmp_path / "Card" / "Card.ts", "export {};\n")

    with pytest.raises(RenameCollisionError):
        project.move_file(index, tmp_path / "Card" / "Card.ts")


def test_save_writes_only_modified_files_and_keeps_crlf(tmp_path: Path) -> None:
    _write(tmp_path / "lib" / "index.ts", "export {};\n")
    (tmp_path / "main.ts").write_bytes(b"import lib from './lib';\r\nlib();\r\n")
    _write(tmp_path / "untouched.ts", "import lib from './lib';\n")
    project = load_project(tmp_path, _tsconfig(tmp_path), SOURCES)
    main = project.get_source_file(tmp_path / "main.ts")
    assert main is not None

    (declaration,) = main.import_declarations()
    declaration.set_specifier("./lib/lib")
    saved = project.save()

    assert saved == [main.path]
    assert (tmp_path / "main.ts").read_bytes() == b"import lib from './lib/lib';\r\nlib();\r\n"
    assert (tmp_path / "untouched.ts").read_text(encoding="utf-8") == "import lib from './lib';\n"
    assert not main.is_modified
