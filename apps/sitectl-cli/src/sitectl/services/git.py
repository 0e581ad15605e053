"""Bare repository initialisation for push-to-deploy."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from sitectl.services import shell


class RepoInitializer(Protocol):
    def init_bare(self, repo_dir: Path) -> None: ...


class GitRepoInitializer:
    """Run ``git init --bare`` in an existing directory."""

    def init_bare(self, repo_dir: Path) -> None:
        shell.run(["git", "init", "--bare", str(repo_dir)])
