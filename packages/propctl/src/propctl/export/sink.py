"""Append-only ``NAME=VALUE`` export file consumed by the CI runner."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ..core.env import getenv_nonempty
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_EXTRACT
from ..properties.changes import PROPERTIES_SUFFIX
from ..properties.record import PropertyRecord

CHANGED_FILE_VAR = "CHANGED_PROPERTIES_FILE"


class ExportFailed(ScriptError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"failed to write export file {path}: {reason}", ERR_EXTRACT, kind="export_failed")
        self.path = path


@dataclass(frozen=True)
class ExportSink:
    path: Path | None

    @classmethod
    def from_env(cls, override: str | None = None, environ: Mapping[str, str] | None = None) -> "ExportSink":
        raw = override or getenv_nonempty("GITHUB_ENV", environ)
        return cls(Path(raw) if raw else None)

    @property
    def available(self) -> bool:
        return self.path is not None

    def append(self, entries: list[tuple[str, str]]) -> None:
        if self.path is None or not entries:
            return
        try:
            with self.path.open("a", encoding="utf-8") as handle:
                for name, value in entries:
                    handle.write(f"{name}={value}\n")
        except OSError as exc:
            raise ExportFailed(self.path, exc.strerror or str(exc)) from exc


def file_prefix(path: str) -> str:
    name = Path(path).name
    if name.endswith(PROPERTIES_SUFFIX):
        name = name[: -len(PROPERTIES_SUFFIX)]
    return name.upper().replace("-", "_")


def export_entries(record: PropertyRecord, mode: str) -> list[tuple[str, str]]:
    generic = [(spec.export_name, record.get(spec.key)) for spec in record.fields]
    entries: list[tuple[str, str]] = []
    if mode == "multi":
        prefix = file_prefix(record.path)
        entries.extend((f"{prefix}_{name}", value) for name, value in generic)
    entries.extend(generic)
    entries.append((CHANGED_FILE_VAR, record.path))
    return entries


def export_record(record: PropertyRecord, sink: ExportSink, mode: str) -> list[str]:
    """Append the record's variables to ``sink`` and return the names written.

    In multi mode each file also gets ``<PREFIX>_<NAME>`` copies, written
    before the generic names so a later file overwrites only the generic ones.
    """
    if not sink.available:
        return []
    entries = export_entries(record, mode)
    sink.append(entries)
    return [name for name, _ in entries]
