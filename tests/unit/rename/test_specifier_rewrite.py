from __future__ import annotations

from index_renamer.rename import rewrite_specifier


def test_implicit_directory_specifier_gains_parent_name() -> None:
    assert rewrite_specifier("./components/Button", "Button") == "./components/Button/Button"


def test_explicit_index_suffix_is_replaced() -> None:
    assert rewrite_specifier("./components/Button/index", "Button") == (
        "./components/Button/Button"
    )


def test_alias_specifier_is_rewritten_the_same_way() -> None:
    assert rewrite_specifier("@/ui/Card", "Card") == "@/ui/Card/Card"


def test_dot_specifiers_point_into_the_directory() -> None:
    assert rewrite_specifier(".", "lib") == "./lib"
    assert rewrite_specifier("..", "lib") == "../lib"
    assert rewrite_specifier("./index", "lib") == "./lib"


def test_trailing_slash_is_not_doubled() -> None:
    assert rewrite_specifier("./components/Button/", "Button") == "./components/Button/Button"


def test_explicit_index_file_with_extension_keeps_extension() -> None:
    assert rewrite_specifier("./Button/index.js", "Button") == "./Button/Button.js"
    assert rewrite_specifier("./index.js", "Button") == "./Button.js"


def test_directory_named_like_index_file_gains_parent_name() -> None:
    assert rewrite_specifier("./index.v2", "index.v2") == "./index.v2/index.v2"
    assert rewrite_specifier("../lib/index.v2/", "index.v2") == "../lib/index.v2/index.v2"
