from __future__ import annotations

from pathlib import Path


def schemas_root() -> Path:
    return Path(__file__).resolve().parent / "schemas"
