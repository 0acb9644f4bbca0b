from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from .env import getenv_nonempty
from .errors import ScriptError
from .exit_codes import ERR_USAGE
from .git import find_repo_root, read_git_sha

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True)
class RunContext:
    run_id: str
    repo_root: Path
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    log_json: bool
    git_sha: str

    @property
    def as_json(self) -> bool:
        return self.output_format == "json"

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        repo_root: str | None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
        environ: Mapping[str, str] | None = None,
    ) -> "RunContext":
        if repo_root:
            root = Path(repo_root).resolve()
            if not root.is_dir():
                raise ScriptError(f"repo root is not a directory: {repo_root}", ERR_USAGE, kind="config_error")
        else:
            root = find_repo_root(Path.cwd().resolve())
        git_sha = read_git_sha(root)
        default_run = f"propctl-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}-{git_sha}"
        resolved_run_id = run_id or getenv_nonempty("RUN_ID", environ) or default_run
        return cls(
            run_id=resolved_run_id,
            repo_root=root,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
            git_sha=git_sha,
        )
