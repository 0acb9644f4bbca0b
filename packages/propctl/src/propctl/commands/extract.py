from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path

from ..config import MODES, WHITESPACE_POLICIES, Settings, load_settings
from ..core.context import RunContext
from ..core.env import getenv_nonempty
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_USAGE, OK
from ..core.logging import log_info, log_warning
from ..core.serialize import dumps_json
from ..export.sink import ExportSink, export_record, file_prefix
from ..properties.changes import PROPERTIES_SUFFIX, detect_changed_files
from ..properties.fields import fields_for_mode
from ..properties.record import NOT_FOUND, MissingRequiredField, PropertyRecord, extract_record

BANNER = "=" * 42


@dataclass
class FileResult:
    path: str
    prefix: str
    values: dict[str, str]
    exported: list[str]


@dataclass
class ExtractReport:
    run_id: str
    commit: str
    mode: str
    export_file: str | None
    changed_files: list[str] = field(default_factory=list)
    files: list[FileResult] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[dict[str, object]] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "error" if self.errors else "ok"

    def record_error(self, exc: ScriptError) -> None:
        self.errors.append({"code": exc.code, "kind": exc.kind, "message": exc.message})

    def to_payload(self) -> dict[str, object]:
        return {
            "schema_name": "propctl.extract.v1",
            "schema_version": 1,
            "tool": "propctl",
            "status": self.status,
            "run_id": self.run_id,
            "commit": self.commit,
            "mode": self.mode,
            "export_file": self.export_file,
            "changed_files": list(self.changed_files),
            "files": [
                {"path": f.path, "prefix": f.prefix, "values": dict(f.values), "exported": list(f.exported)}
                for f in self.files
            ],
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }


def say(ctx: RunContext, text: str = "", force: bool = False) -> None:
    """Print a line of the human-readable summary.

    JSON runs send the summary to stderr so stdout carries only the payload.
    """
    if ctx.quiet and not force:
        return
    print(text, file=sys.stderr if ctx.as_json else sys.stdout)


def _print_values(ctx: RunContext, record: PropertyRecord, quoted: bool = False) -> None:
    width = max(len(spec.key) for spec in record.fields)
    for spec in record.fields:
        value = record.get(spec.key)
        if quoted:
            shown = f"'{value or NOT_FOUND}'"
        else:
            shown = value or (NOT_FOUND if spec.required else "(not set)")
        say(ctx, f"    {spec.key:<{width}} : {shown}", force=quoted)


def resolve_commit(commit: str | None) -> str:
    resolved = commit or getenv_nonempty("GITHUB_SHA")
    if not resolved:
        raise ScriptError("no commit given: set GITHUB_SHA or pass --commit", ERR_USAGE, kind="config_error")
    return resolved


def _warn_multiple(ctx: RunContext, report: ExtractReport, changed: tuple[str, ...], mode: str) -> tuple[str, ...]:
    say(ctx, f"WARNING: Multiple {PROPERTIES_SUFFIX} files changed in this commit:")
    for path in changed:
        say(ctx, f"    {path}")
    say(ctx)
    if mode == "multi":
        report.warnings.append(f"multiple {PROPERTIES_SUFFIX} files changed; processing all {len(changed)}")
        log_warning(ctx, "extract", "multiple-files", count=len(changed), mode=mode)
        say(ctx, "Processing all detected files...")
        return changed
    report.warnings.append(f"multiple {PROPERTIES_SUFFIX} files changed; processing only {changed[0]}")
    log_warning(ctx, "extract", "multiple-files", count=len(changed), mode=mode, ignored=",".join(changed[1:]))
    say(ctx, f"Processing only the first detected file: {changed[0]}")
    return changed[:1]


def process_file(ctx: RunContext, path: str, sink: ExportSink, settings: Settings) -> FileResult:
    say(ctx)
    say(ctx, BANNER)
    say(ctx, f"Processing: {path}")
    say(ctx, BANNER)

    def echo(text: str) -> None:
        say(ctx, "---------- File Content ----------")
        say(ctx, text.rstrip("\n"))
        say(ctx, "----------------------------------")

    try:
        record = extract_record(path, fields_for_mode(settings.mode), settings.whitespace, ctx.repo_root, on_read=echo)
    except MissingRequiredField as exc:
        say(ctx, f"ERROR: One or more values could not be extracted from '{path}'.", force=True)
        _print_values(ctx, exc.record, quoted=True)
        raise

    say(ctx)
    say(ctx, f"Extracted values from {path}:")
    _print_values(ctx, record)

    exported = export_record(record, sink, settings.mode)
    if exported:
        say(ctx, f"Exported: {', '.join(exported)}")
        log_info(ctx, "export", "append", file=path, sink=str(sink.path), names=len(exported))
    return FileResult(path=path, prefix=file_prefix(path), values=dict(record.values), exported=exported)


def run_extract(
    ctx: RunContext,
    commit: str,
    sink: ExportSink,
    settings: Settings,
    report: ExtractReport | None = None,
) -> ExtractReport:
    """Detect, extract, validate and export every changed properties file.

    The first failing file aborts the run; files exported before it stay in
    the sink.
    """
    report = report or ExtractReport(ctx.run_id, commit, settings.mode, str(sink.path) if sink.path else None)
    say(ctx, f"Triggered by commit: {commit}")
    say(ctx, f"Detecting changed {PROPERTIES_SUFFIX} file in commit {commit}...")
    log_info(ctx, "extract", "start", commit=commit, mode=settings.mode, whitespace=settings.whitespace, sink=sink.available)

    changed = detect_changed_files(commit, ctx.repo_root, ctx)
    report.changed_files = list(changed)
    selected = _warn_multiple(ctx, report, changed, settings.mode) if len(changed) > 1 else changed

    for path in selected:
        report.files.append(process_file(ctx, path, sink, settings))

    say(ctx)
    say(ctx, f"Done processing all changed {PROPERTIES_SUFFIX} files.")
    log_info(ctx, "extract", "done", files=len(report.files))
    return report


def _settings_from_ns(ctx: RunContext, ns: argparse.Namespace) -> Settings:
    overrides = {"mode": getattr(ns, "mode", None), "whitespace": getattr(ns, "whitespace", None)}
    return load_settings(ctx.repo_root, getattr(ns, "config", None), overrides=overrides)


def _write_report(ctx: RunContext, out_file: str | None, payload: dict[str, object]) -> None:
    if not out_file:
        return
    raw = Path(out_file)
    out_path = raw if raw.is_absolute() else ctx.repo_root / raw
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(dumps_json(payload, pretty=True) + "\n", encoding="utf-8")


def run_extract_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    # Created before settings and commit resolve so usage errors still reach --out-file.
    report = ExtractReport(ctx.run_id, "", getattr(ns, "mode", None) or "multi", None)
    try:
        settings = _settings_from_ns(ctx, ns)
        report.mode = settings.mode
        sink = ExportSink.from_env(ns.env_file)
        report.export_file = str(sink.path) if sink.path else None
        commit = resolve_commit(ns.commit)
        report.commit = commit
        run_extract(ctx, commit, sink, settings, report)
    except ScriptError as exc:
        report.record_error(exc)
        _write_report(ctx, ns.out_file, report.to_payload())
        raise
    payload = report.to_payload()
    _write_report(ctx, ns.out_file, payload)
    if ctx.as_json:
        print(dumps_json(payload))
    return OK


def run_detect_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    commit = resolve_commit(ns.commit)
    changed = detect_changed_files(commit, ctx.repo_root, ctx)
    if ctx.as_json:
        print(dumps_json({"schema_version": 1, "tool": "propctl", "status": "ok", "commit": commit, "changed_files": list(changed)}))
    else:
        for path in changed:
            print(path)
    return OK


def run_parse_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    settings = _settings_from_ns(ctx, ns)
    try:
        record = extract_record(ns.file, fields_for_mode(settings.mode), settings.whitespace, ctx.repo_root)
    except MissingRequiredField as exc:
        if not ctx.as_json:
            say(ctx, f"ERROR: One or more values could not be extracted from '{ns.file}'.", force=True)
            _print_values(ctx, exc.record, quoted=True)
        raise
    if ctx.as_json:
        print(dumps_json({"schema_version": 1, "tool": "propctl", "status": "ok", "path": ns.file, "values": dict(record.values)}))
    else:
        for spec in record.fields:
            print(f"{spec.export_name}={record.get(spec.key)}")
    return OK


def _add_settings_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--mode", choices=MODES, default=None, help="multi: every changed file; single: first file only")
    p.add_argument("--whitespace", choices=WHITESPACE_POLICIES, default=None, help="all: drop every whitespace char; edges: strip ends")


def configure_extract_parsers(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    extract = sub.add_parser("extract", help="export values of the properties files changed by a commit")
    extract.add_argument("--commit", help="commit to inspect (default: $GITHUB_SHA)")
    extract.add_argument("--env-file", help="export file to append to (default: $GITHUB_ENV)")
    extract.add_argument("--out-file", help="optional output path for the JSON run report")
    extract.add_argument("--json", action="store_true", help="emit JSON output")
    _add_settings_flags(extract)

    detect = sub.add_parser("detect", help="list the properties files changed by a commit")
    detect.add_argument("--commit", help="commit to inspect (default: $GITHUB_SHA)")
    detect.add_argument("--json", action="store_true", help="emit JSON output")

    parse = sub.add_parser("parse", help="extract and validate one properties file without exporting")
    parse.add_argument("file", help="properties file path, relative to the repo root")
    parse.add_argument("--json", action="store_true", help="emit JSON output")
    _add_settings_flags(parse)


COMMAND_RUNNERS = {
    "extract": run_extract_command,
    "detect": run_detect_command,
    "parse": run_parse_command,
}
