from __future__ import annotations

import argparse
import sys

from .. import __version__
from ..commands.extract import COMMAND_RUNNERS, configure_extract_parsers
from ..core.context import RunContext
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_INTERNAL, OK
from ..core.logging import log_event, log_info
from ..core.serialize import dumps_json
from .output import render_error, resolve_output_format


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="propctl", description="export values of changed .properties files to the CI environment")
    p.add_argument("--version", action="version", version=f"propctl {__version__}")
    p.add_argument("--repo-root", help="git working tree to inspect (default: current directory)")
    p.add_argument("--config", help="settings file (default: $PROPCTL_CONFIG or <repo-root>/.propctl.yaml)")
    p.add_argument("--run-id", help="run identifier for logs and reports")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--log-json", action="store_true", help="emit log events as JSON lines on stderr")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable verbose diagnostics")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    configure_extract_parsers(sub)
    version_p = sub.add_parser("version", help="print version and git context")
    version_p.add_argument("--json", action="store_true", help="emit JSON output")
    return p


def run_version_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    if ctx.as_json:
        print(dumps_json({"schema_version": 1, "tool": "propctl", "status": "ok", "version": __version__, "git_sha": ctx.git_sha}))
    else:
        suffix = "" if ctx.git_sha == "unknown" else f"+{ctx.git_sha}"
        print(f"propctl {__version__}{suffix}")
    return OK


def dispatch_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    if ns.cmd == "version":
        return run_version_command(ctx, ns)
    return COMMAND_RUNNERS[ns.cmd](ctx, ns)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    fmt = resolve_output_format(cli_json=bool(getattr(ns, "json", False)), cli_format=ns.format)
    try:
        ctx = RunContext.from_args(ns.run_id, ns.repo_root, fmt, ns.verbose, ns.quiet, ns.log_json)  # type: ignore[arg-type]
    except ScriptError as exc:
        print(render_error(as_json=fmt == "json", message=str(exc), code=exc.code, kind=exc.kind, run_id=ns.run_id or ""), file=sys.stderr)
        return exc.code
    try:
        log_info(ctx, "cli", "start", cmd=ns.cmd, fmt=ctx.output_format, repo_root=str(ctx.repo_root))
        rc = dispatch_command(ctx, ns)
        log_info(ctx, "cli", "finish", cmd=ns.cmd, rc=rc)
        return rc
    except ScriptError as exc:
        if ctx.verbose:
            log_event(ctx, "error", "cli", "failed", cmd=ns.cmd, kind=exc.kind, code=exc.code)
        print(
            render_error(as_json=ctx.as_json, message=str(exc), code=exc.code, kind=exc.kind, run_id=ctx.run_id),
            file=sys.stderr,
        )
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(
            render_error(
                as_json=ctx.as_json,
                message=f"internal error: {exc}",
                code=ERR_INTERNAL,
                kind="internal_error",
                run_id=ctx.run_id,
            ),
            file=sys.stderr,
        )
        return ERR_INTERNAL


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
