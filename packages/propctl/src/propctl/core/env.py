"""Centralized environment variable helpers."""

from __future__ import annotations

import os
from collections.abc import Mapping


def getenv(name: str, default: str | None = None, environ: Mapping[str, str] | None = None) -> str | None:
    source = os.environ if environ is None else environ
    return source.get(name, default)


def getenv_nonempty(name: str, environ: Mapping[str, str] | None = None) -> str | None:
    value = getenv(name, None, environ)
    if value is None or not value.strip():
        return None
    return value.strip()
