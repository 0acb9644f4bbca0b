from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .logging import log_info

if TYPE_CHECKING:
    from .context import RunContext


@dataclass(frozen=True)
class CommandResult:
    code: int
    stdout: str
    stderr: str
    duration_ms: int


def run_command(cmd: list[str], cwd: Path, ctx: RunContext | None = None) -> CommandResult:
    started = time.monotonic()
    try:
        proc = subprocess.run(cmd, cwd=cwd, text=True, capture_output=True, check=False)
    except OSError as exc:
        # 127 mirrors the shell for a missing executable; a bad cwd or permission error is 1.
        code = 127 if isinstance(exc, FileNotFoundError) and exc.filename == cmd[0] else 1
        result = CommandResult(code=code, stdout="", stderr=str(exc), duration_ms=int((time.monotonic() - started) * 1000))
    else:
        result = CommandResult(
            code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    if ctx is not None:
        log_info(
            ctx,
            "process",
            "run-command",
            command=" ".join(cmd),
            cwd=str(cwd),
            code=result.code,
            duration_ms=result.duration_ms,
        )
    return result
