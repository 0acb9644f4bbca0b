from __future__ import annotations

from pathlib import Path

import pytest

from propctl.config import Settings, load_settings
from propctl.core.errors import ScriptError


def test_defaults_without_config_file(tmp_path: Path) -> None:
    settings = load_settings(tmp_path, environ={})
    assert settings == Settings(mode="multi", whitespace="all", source="defaults")


def test_yaml_file_is_loaded(tmp_path: Path) -> None:
    (tmp_path / ".propctl.yaml").write_text("mode: single\nwhitespace: edges\n", encoding="utf-8")
    settings = load_settings(tmp_path, environ={})
    assert settings.mode == "single"
    assert settings.whitespace == "edges"
    assert settings.source.endswith(".propctl.yaml")


def test_empty_yaml_file_keeps_defaults(tmp_path: Path) -> None:
    (tmp_path / ".propctl.yaml").write_text("", encoding="utf-8")
    assert load_settings(tmp_path, environ={}).mode == "multi"


def test_env_overrides_file_and_cli_overrides_env(tmp_path: Path) -> None:
    (tmp_path / ".propctl.yaml").write_text("mode: single\n", encoding="utf-8")
    settings = load_settings(tmp_path, environ={"PROPCTL_MODE": "multi", "PROPCTL_WHITESPACE": "edges"})
    assert (settings.mode, settings.whitespace) == ("multi", "edges")
    settings = load_settings(tmp_path, environ={"PROPCTL_MODE": "multi"}, overrides={"mode": "single", "whitespace": None})
    assert (settings.mode, settings.whitespace) == ("single", "all")


def test_explicit_config_path_via_env(tmp_path: Path) -> None:
    (tmp_path / "ci").mkdir()
    (tmp_path / "ci" / "propctl.yaml").write_text("whitespace: edges\n", encoding="utf-8")
    settings = load_settings(tmp_path, environ={"PROPCTL_CONFIG": "ci/propctl.yaml"})
    assert settings.whitespace == "edges"


@pytest.mark.parametrize(
    "content",
    [
        "mode: both\n",
        "colour: blue\n",
        "- mode\n",
        "mode: [unclosed\n",
    ],
)
def test_invalid_config_file_is_a_usage_error(tmp_path: Path, content: str) -> None:
    (tmp_path / ".propctl.yaml").write_text(content, encoding="utf-8")
    with pytest.raises(ScriptError) as excinfo:
        load_settings(tmp_path, environ={})
    assert excinfo.value.code == 2
    assert excinfo.value.kind == "config_error"


def test_missing_explicit_config_is_a_usage_error(tmp_path: Path) -> None:
    with pytest.raises(ScriptError, match="config file not found"):
        load_settings(tmp_path, "nope.yaml", environ={})


def test_invalid_env_value_is_a_usage_error(tmp_path: Path) -> None:
    with pytest.raises(ScriptError, match="PROPCTL_WHITESPACE"):
        load_settings(tmp_path, environ={"PROPCTL_WHITESPACE": "some"})
