from __future__ import annotations

import subprocess
from pathlib import Path

import pytest
from hypothesis import settings

_ALLOWED_MARKERS = {"unit", "integration", "slow"}
_ISOLATED_ENV = ("GITHUB_SHA", "GITHUB_ENV", "PROPCTL_CONFIG", "PROPCTL_MODE", "PROPCTL_WHITESPACE", "RUN_ID")

settings.register_profile("propctl", deadline=None, max_examples=60)
settings.load_profile("propctl")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def isolated_ci_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ISOLATED_ENV:
        monkeypatch.delenv(key, raising=False)


class GitRepo:
    def __init__(self, root: Path) -> None:
        self.root = root

    def git(self, *args: str) -> str:
        proc = subprocess.run(
            [
                "git",
                "-c",
                "user.name=propctl tests",
                "-c",
                "user.email=tests@propctl.invalid",
                "-c",
                "commit.gpgsign=false",
                *args,
            ],
            cwd=self.root,
            text=True,
            capture_output=True,
            check=True,
        )
        return proc.stdout

    def write(self, rel: str, content: str) -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def commit(self, message: str = "change") -> str:
        self.git("add", "-A")
        self.git("commit", "--allow-empty", "-q", "-m", message)
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def empty_git_repo(tmp_path: Path) -> GitRepo:
    root = tmp_path / "repo"
    root.mkdir()
    repo = GitRepo(root)
    repo.git("init", "-q")
    return repo


@pytest.fixture
def git_repo(empty_git_repo: GitRepo) -> GitRepo:
    repo = empty_git_repo
    repo.write("README.md", "seed\n")
    repo.commit("seed")
    return repo


@pytest.fixture
def env_file(tmp_path: Path) -> Path:
    return tmp_path / "github_env"
