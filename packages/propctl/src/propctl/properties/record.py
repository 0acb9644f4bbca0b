"""Line-prefix extraction of the recognized keys from a ``.properties`` file.

Only lines starting with a recognized key followed by ``=`` are read. The
first matching line wins and its value is everything after the first ``=``.
There is no support for quoting, escapes, continuation lines or comments.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..core.errors import ScriptError
from ..core.exit_codes import ERR_EXTRACT
from .fields import FieldSpec

NOT_FOUND = "NOT FOUND"


@dataclass(frozen=True)
class PropertyRecord:
    path: str
    fields: tuple[FieldSpec, ...]
    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str:
        return self.values.get(key, "")

    def missing(self) -> list[str]:
        return [spec.key for spec in self.fields if spec.required and not self.get(spec.key)]


class PropertiesFileNotFound(ScriptError):
    def __init__(self, path: str) -> None:
        super().__init__(f"'{path}' not found in workspace", ERR_EXTRACT, kind="file_not_found")
        self.path = path


class MissingRequiredField(ScriptError):
    def __init__(self, record: PropertyRecord, missing: list[str]) -> None:
        super().__init__(
            f"one or more values could not be extracted from '{record.path}': {', '.join(missing)}",
            ERR_EXTRACT,
            kind="missing_required_field",
        )
        self.record = record
        self.missing = missing


def clean_value(raw: str, whitespace: str = "all") -> str:
    if whitespace == "all":
        return "".join(raw.split())
    if whitespace == "edges":
        return raw.strip()
    raise ValueError(f"unknown whitespace policy: {whitespace}")


def _key_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(key)}[ \t]*=")


def find_raw_value(lines: Iterable[str], key: str) -> str | None:
    pattern = _key_pattern(key)
    for line in lines:
        match = pattern.match(line)
        if match:
            return line[match.end():]
    return None


def parse_record(path: str, text: str, fields: tuple[FieldSpec, ...], whitespace: str = "all") -> PropertyRecord:
    lines = text.split("\n")
    values: dict[str, str] = {}
    for spec in fields:
        raw = find_raw_value(lines, spec.key)
        values[spec.key] = clean_value(raw, whitespace) if raw is not None else ""
    return PropertyRecord(path=path, fields=fields, values=values)


def resolve_in_tree(path: str, repo_root: Path | None = None) -> Path:
    candidate = Path(path)
    if candidate.is_absolute() or repo_root is None:
        return candidate
    return repo_root / candidate


def read_properties_file(path: str, repo_root: Path | None = None) -> str:
    resolved = resolve_in_tree(path, repo_root)
    if not resolved.is_file():
        raise PropertiesFileNotFound(path)
    return resolved.read_text(encoding="utf-8", errors="replace")


def validate_record(record: PropertyRecord) -> PropertyRecord:
    missing = record.missing()
    if missing:
        raise MissingRequiredField(record, missing)
    return record


def extract_record(
    path: str,
    fields: tuple[FieldSpec, ...],
    whitespace: str = "all",
    repo_root: Path | None = None,
    on_read: Callable[[str], None] | None = None,
) -> PropertyRecord:
    """Read, parse and validate one file.

    ``on_read`` sees the raw text before validation so callers can echo it.
    """
    text = read_properties_file(path, repo_root)
    if on_read is not None:
        on_read(text)
    return validate_record(parse_record(path, text, fields, whitespace))
