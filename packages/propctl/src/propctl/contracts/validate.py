from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema

from ..core.errors import ScriptError
from ..core.exit_codes import ERR_INTERNAL
from . import schemas_root


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    version: int
    file: str


def _catalog_path() -> Path:
    return schemas_root() / "catalog.json"


def load_catalog() -> dict[str, CatalogEntry]:
    raw = json.loads(_catalog_path().read_text(encoding="utf-8"))
    entries: dict[str, CatalogEntry] = {}
    for row in raw.get("schemas", []):
        entry = CatalogEntry(name=row["name"], version=int(row["version"]), file=row["file"])
        entries[entry.name] = entry
    return entries


def load_schema(schema_name: str) -> dict[str, Any]:
    entry = load_catalog().get(schema_name)
    if entry is None:
        raise ScriptError(f"unknown schema: {schema_name}", ERR_INTERNAL, kind="unknown_schema")
    return json.loads((schemas_root() / entry.file).read_text(encoding="utf-8"))


def schema_errors(schema_name: str, payload: object) -> list[str]:
    """Return every validation error as ``<pointer>: <message>``, sorted by location."""
    validator = jsonschema.Draft202012Validator(load_schema(schema_name))
    errors: list[str] = []
    for err in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path]):
        pointer = "/".join(str(p) for p in err.absolute_path) or "<root>"
        errors.append(f"{pointer}: {err.message}")
    return errors
