"""Tests for path mapping helpers."""

from pathlib import Path

import pytest

from promptboost.path_utils import base_name, map_path


def test_home_prefix(monkeypatch, tmp_path):
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    assert map_path("~") == str(tmp_path.resolve())
    assert map_path("~/.promptboost/settings.json") == str(
        tmp_path.resolve() / ".promptboost" / "settings.json"
    )


def test_home_escape_is_rejected(monkeypatch, tmp_path):
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    with pytest.raises(ValueError, match="escapes home"):
        map_path("~/../outside")


def test_relative_paths_resolve_against_cwd(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    assert map_path("notes.prompt.md") == str(tmp_path.resolve() / "notes.prompt.md")


@pytest.mark.parametrize("value", ["", "   ", "a\x00b"])
def test_invalid_paths(value):
    with pytest.raises(ValueError):
        map_path(value)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("a/b/c.md", "c.md"),
        ("C:\\x\\y.prompt.md", "y.prompt.md"),
        ("plain.md", "plain.md"),
        ("dir/", "dir/"),
    ],
)
def test_base_name(value, expected):
    assert base_name(value) == expected
