"""Settings resolution: defaults, then the YAML file, then env vars, then CLI flags."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from ..contracts.validate import schema_errors
from ..core.env import getenv_nonempty
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_USAGE

DEFAULT_CONFIG_NAME = ".propctl.yaml"
MODES = ("single", "multi")
WHITESPACE_POLICIES = ("all", "edges")

_ENV_KEYS = {"mode": "PROPCTL_MODE", "whitespace": "PROPCTL_WHITESPACE"}
_CHOICES = {"mode": MODES, "whitespace": WHITESPACE_POLICIES}


@dataclass(frozen=True)
class Settings:
    mode: str = "multi"
    whitespace: str = "all"
    source: str = "defaults"


def _config_error(message: str) -> ScriptError:
    return ScriptError(message, ERR_USAGE, kind="config_error")


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise _config_error(f"{path}: invalid YAML: {exc}") from exc
    if data is None:
        return {}
    errors = schema_errors("propctl.settings.v1", data)
    if errors:
        raise _config_error(f"{path}: invalid settings: {'; '.join(errors)}")
    return data


def _resolve_config_path(repo_root: Path, config_path: str | None, environ: Mapping[str, str] | None) -> tuple[Path, bool]:
    explicit = config_path or getenv_nonempty("PROPCTL_CONFIG", environ)
    if explicit:
        raw = Path(explicit)
        return (raw if raw.is_absolute() else repo_root / raw), True
    return repo_root / DEFAULT_CONFIG_NAME, False


def load_settings(
    repo_root: Path,
    config_path: str | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, str | None] | None = None,
) -> Settings:
    settings = Settings()
    path, explicit = _resolve_config_path(repo_root, config_path, environ)
    if path.is_file():
        data = _load_yaml(path)
        settings = replace(settings, source=str(path), **data)
    elif explicit:
        raise _config_error(f"config file not found: {path}")

    for field, env_key in _ENV_KEYS.items():
        value = getenv_nonempty(env_key, environ)
        if value is None:
            continue
        if value not in _CHOICES[field]:
            raise _config_error(f"{env_key}={value} is not one of: {', '.join(_CHOICES[field])}")
        settings = replace(settings, **{field: value})

    for field, value in (overrides or {}).items():
        if value is not None:
            settings = replace(settings, **{field: value})
    return settings
