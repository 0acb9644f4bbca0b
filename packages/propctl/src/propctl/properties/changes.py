from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..core.errors import ScriptError
from ..core.exit_codes import ERR_EXTRACT
from ..core.git import commit_changed_paths

if TYPE_CHECKING:
    from ..core.context import RunContext

PROPERTIES_SUFFIX = ".properties"


class NoPropertiesFileChanged(ScriptError):
    def __init__(self, commit: str) -> None:
        super().__init__(
            f"no {PROPERTIES_SUFFIX} file found in commit {commit}",
            ERR_EXTRACT,
            kind="no_properties_file_changed",
        )
        self.commit = commit


def is_properties_path(path: str) -> bool:
    return path.endswith(PROPERTIES_SUFFIX)


def detect_changed_files(commit: str, repo_root: Path, ctx: RunContext | None = None) -> tuple[str, ...]:
    """Return the ``.properties`` paths changed by ``commit``, in git's order."""
    changed = tuple(path for path in commit_changed_paths(commit, repo_root, ctx) if is_properties_path(path))
    if not changed:
        raise NoPropertiesFileChanged(commit)
    return changed
