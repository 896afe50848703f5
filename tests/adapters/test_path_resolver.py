from __future__ import annotations

from pathlib import Path

from lib_layered_registry.adapters.path_resolvers.default import find_config_file


def test_finds_file_in_search_path(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text("{}", encoding="utf-8")
    assert find_config_file("config", "json", [str(tmp_path)]) == str(tmp_path / "config.json")


def test_returns_none_when_missing(tmp_path: Path) -> None:
    assert find_config_file("config", "json", [str(tmp_path)]) is None
    assert find_config_file("config", "json", []) is None


def test_first_directory_wins(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    for directory in (first, second):
        directory.mkdir()
        (directory / "app.yaml").write_text("a: 1\n", encoding="utf-8")
    assert find_config_file("app", "yaml", [str(first), str(second)]) == str(first / "app.yaml")


def test_skips_nonexistent_directories(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text("", encoding="utf-8")
    found = find_config_file("config", "toml", [str(tmp_path / "nope"), str(tmp_path)])
    assert found == str(tmp_path / "config.toml")


def test_name_and_extension_must_both_match(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text("{}", encoding="utf-8")
    (tmp_path / "settings.yaml").write_text("{}", encoding="utf-8")
    assert find_config_file("config", "yaml", [str(tmp_path)]) is None
    assert find_config_file("settings", "json", [str(tmp_path)]) is None


def test_directories_are_not_matched(tmp_path: Path) -> None:
    (tmp_path / "config.json").mkdir()
    assert find_config_file("config", "json", [str(tmp_path)]) is None
