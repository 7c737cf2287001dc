from __future__ import annotations

import io
import json
from pathlib import Path

from index_renamer.cli import main


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _run(root: Path, *argv: str) -> tuple[int, str, str]:
    out = io.StringIO()
    err = io.StringIO()
    code = main(list(argv), out_stream=out, err_stream=err, working_dir=root)
    return code, out.getvalue(), err.getvalue()


def _project(root: Path, tsconfig: str = "{}") -> None:
    _write(root / "tsconfig.json", tsconfig)


def test_implicit_directory_import_is_rewritten(tmp_path: Path) -> None:
    _project(tmp_path)
    _write(tmp_path / "src" / "components" / "Button" / "index.tsx", "export default 1;\n")
    _write(tmp_path / "src" / "App.tsx", "import Button from './components/Button';\n")

    code, out, err = _run(tmp_path)

    assert code == 0, err
    assert (tmp_path / "src" / "components" / "Button" / "Button.tsx").exists()
    assert not (tmp_path / "src" / "components" / "Button" / "index.tsx").exists()
    assert (tmp_path / "src" / "App.tsx").read_text(encoding="utf-8") == (
        "import Button from './components/Button/Button';\n"
    )
    assert "Found 2 source files in the project." in out
    assert "Found 1 index files to rename in the target folder." in out
    assert "src/components/Button/index.tsx -> src/components/Button/Button.tsx" in out
    assert out.rstrip().endswith("All files renamed and imports updated successfully!")


def test_pattern_index_file_leaves_other_files_untouched(tmp_path: Path) -> None:
    _project(tmp_path)
    _write(tmp_path / "src" / "components" / "Button" / "index.test.ts", "export {};\n")
    app_text = "import Button from './components/Button/index.test';\n"
    _write(tmp_path / "src" / "App.tsx", app_text)

    code, _, err = _run(tmp_path)

    assert code == 0, err
    assert (tmp_path / "src" / "components" / "Button" / "Button.test.ts").exists()
    assert (tmp_path / "src" / "App.tsx").read_text(encoding="utf-8") == app_text


def test_explicit_index_import_is_rewritten(tmp_path: Path) -> None:
    _project(tmp_path)
    _write(tmp_path / "src" / "components" / "Button" / "index.tsx", "export default 1;\n")
    _write(tmp_path / "src" / "App.tsx", "import Button from './components/Button/index';\n")

    code, _, err = _run(tmp_path)

    assert code == 0, err
    assert (tmp_path / "src" / "App.tsx").read_text(encoding="utf-8") == (
        "import Button from './components/Button/Button';\n"
    )


def test_path_alias_import_is_rewritten(tmp_path: Path) -> None:
    _project(
        tmp_path,
        '{\n  // aliases\n  "compilerOptions": {"baseUrl": ".", "paths": {"@/*": ["src/*"]},},\n}\n',
    )
    _write(tmp_path / "src" / "ui" / "Card" / "index.ts", "export const card = 1;\n")
    _write(tmp_path / "src" / "main.ts", "import { card } from '@/ui/Card';\n")

    code, _, err = _run(tmp_path)

    assert code == 0, err
    assert (tmp_path / "src" / "main.ts").read_text(encoding="utf-8") == (
        "import { card } from '@/ui/Card/Card';\n"
    )


def test_second_run_is_a_no_op(tmp_path: Path) -> None:
    _project(tmp_path)
    _write(tmp_path / "src" / "Card" / "index.ts", "export {};\n")
    _write(tmp_path / "src" / "main.ts", "import './Card';\n")
    assert _run(tmp_path)[0] == 0
    after_first = (tmp_path / "src" / "main.ts").read_text(encoding="utf-8")

    code, out, _ = _run(tmp_path)

    assert code == 0
    assert "Found 0 index files to rename in the target folder." in out
    assert (tmp_path / "src" / "main.ts").read_text(encoding="utf-8") == after_first


def test_dry_run_writes_nothing(tmp_path: Path) -> None:
    _project(tmp_path)
    _write(tmp_path / "src" / "Card" / "index.ts", "export {};\n")
    _write(tmp_path / "src" / "main.ts", "import './Card';\n")

    code, out, _ = _run(tmp_path, "--dry-run")

    assert code == 0
    assert "Would rename: src/Card/index.ts -> src/Card/Card.ts (1 imports updated)" in out
    assert "Dry run: 1 files would be renamed and 1 imports updated" in out
    assert (tmp_path / "src" / "Card" / "index.ts").exists()
    assert (tmp_path / "src" / "main.ts").read_text(encoding="utf-8") == "import './Card';\n"


def test_journal_records_the_full_run(tmp_path: Path) -> None:
    _project(tmp_path)
    _write(tmp_path / "src" / "Card" / "index.ts", "export {};\n")
    _write(tmp_path / "src" / "main.ts", "import './Card';\n")

    code, _, _ = _run(tmp_path, "--journal", "logs/run.jsonl")

    assert code == 0
    lines = (tmp_path / "logs" / "run.jsonl").read_text(encoding="utf-8").splitlines()
    events = [json.loads(line)["event"] for line in lines]
    assert events == [
        "run_started",
        "renamed",
        "specifier_rewritten",
        "saved",
        "run_completed",
    ]


def test_latin1_importer_is_rewritten_byte_for_byte(tmp_path: Path) -> None:
    _project(tmp_path)
    _write(tmp_path / "src" / "Button" / "index.ts", "export default 1;\n")
    header = "// café\n".encode("latin-1")
    padding = b"// filler line\n" * 400
    early = header + b"import B from './Button';\n"
    late = padding + header + b"import B from './Button';\n"
    (tmp_path / "src" / "Early.js").write_bytes(early)
    (tmp_path / "src" / "Late.js").write_bytes(late)

    code, _, err = _run(tmp_path)

    assert code == 0, err
    assert (tmp_path / "src" / "Early.js").read_bytes() == (
        header + b"import B from './Button/Button';\n"
    )
    assert (tmp_path / "src" / "Late.js").read_bytes() == (
        padding + header + b"import B from './Button/Button';\n"
    )
