from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ScriptError
from .exit_codes import ERR_EXTRACT
from .process import run_command

if TYPE_CHECKING:
    from .context import RunContext


class GitCommandFailed(ScriptError):
    def __init__(self, command: list[str], stderr: str) -> None:
        detail = stderr.strip() or "no output"
        super().__init__(f"git command failed: {' '.join(command)}: {detail}", ERR_EXTRACT, kind="git_error")
        self.command = command


def find_repo_root(start: Path) -> Path:
    """Return the top level of the git working tree containing ``start``, or ``start`` outside one."""
    res = run_command(["git", "rev-parse", "--show-toplevel"], start)
    top = res.stdout.strip() if res.code == 0 else ""
    return Path(top).resolve() if top else start


def read_git_sha(repo_root: Path) -> str:
    res = run_command(["git", "rev-parse", "--short", "HEAD"], repo_root)
    sha = res.stdout.strip() if res.code == 0 else ""
    return sha or "unknown"


def commit_changed_paths(commit: str, repo_root: Path, ctx: RunContext | None = None) -> list[str]:
    """Return the paths touched by ``commit`` in the order git reports them.

    Only the commit's own tree diff is inspected. The root commit of a
    repository lists every file it adds.
    """
    cmd = ["git", "diff-tree", "--no-commit-id", "--root", "-r", "--name-only", "-z", commit]
    res = run_command(cmd, repo_root, ctx)
    if res.code != 0:
        raise GitCommandFailed(cmd, res.stderr)
    return [path for path in res.stdout.split("\0") if path.strip()]
