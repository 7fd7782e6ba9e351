import os

import pytest

from pathresolver.resolver.errors import InvalidInputType
from pathresolver.resolver.normalize import is_explicitly_relative, normalize


def test_dot_slash_joins_onto_base_path() -> None:
    assert normalize(f".{os.sep}foo", "/pkg") == os.path.join("/pkg", "foo")


def test_dot_dot_slash_walks_up_from_base_path() -> None:
    assert normalize(f"..{os.sep}other{os.sep}file.js", "/pkg/src") == os.path.normpath("/pkg/other/file.js")


def test_join_has_no_double_separators() -> None:
    result = normalize(f".{os.sep}a{os.sep}b", f"/pkg{os.sep}")
    assert result == os.path.normpath("/pkg/a/b")
    assert os.sep * 2 not in result


@pytest.mark.parametrize("value", ["lodash", "@scope/pkg", "@scope/pkg/sub/path", "pkg/feat/x"])
def test_bare_specifiers_pass_through(value: str) -> None:
    assert normalize(value, "/pkg") == value


def test_absolute_paths_pass_through_untouched() -> None:
    value = os.path.join(os.sep, "abs", "..", "path")
    assert normalize(value, "/pkg") == value


def test_relative_input_without_base_path_is_unchanged() -> None:
    assert normalize(f".{os.sep}foo", None) == f".{os.sep}foo"


def test_hidden_names_are_not_relative() -> None:
    assert not is_explicitly_relative(".config")
    assert not is_explicitly_relative("..foo")
    assert normalize(".config", "/pkg") == ".config"


@pytest.mark.parametrize("value", [None, 42, b"./foo", ["./foo"]])
def test_non_string_input_is_rejected(value: object) -> None:
    with pytest.raises(InvalidInputType) as exc_info:
        normalize(value, "/pkg")

    assert isinstance(exc_info.value, TypeError)
    assert exc_info.value.code == "E_RESOLVE_PATH_INVALID_INPUT"
