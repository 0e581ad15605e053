"""Shared test fixtures."""

from __future__ import annotations

import io
from datetime import date
from pathlib import Path
from typing import Sequence
from unittest.mock import patch

import pytest
from rich.console import Console

from sitectl_common import SiteCtlConfig
from sitectl.errors import ExternalToolError
from sitectl.manager import SiteManager


class FakeConfirmer:
    """Answers prompts from a script; records what was asked."""

    def __init__(self, *answers: bool):
        self.answers = list(answers)
        self.prompts: list[str] = []

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else True


class FakePrivileges:
    def __init__(self, root: bool = True, user: str = "deploy"):
        self.root = root
        self.user = user

    def is_root(self) -> bool:
        return self.root

    def invoking_user(self) -> str:
        return self.user


class FakeArchiver:
    """Writes a marker file instead of running tar; can fail per site."""

    def __init__(self, fail_for: Sequence[str] = ()):
        self.fail_for = set(fail_for)
        self.calls: list[tuple[Path, Path]] = []

    def create(self, source_dir: Path, archive_path: Path) -> None:
        self.calls.append((source_dir, archive_path))
        if source_dir.name in self.fail_for:
            raise ExternalToolError(["tar", "-czf", str(archive_path)], "tar: boom", returncode=2)
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        archive_path.write_text(f"archive of {source_dir}\n")


class FakeRepoInitializer:
    def __init__(self):
        self.calls: list[Path] = []

    def init_bare(self, repo_dir: Path) -> None:
        self.calls.append(repo_dir)
        (repo_dir / "hooks").mkdir(parents=True, exist_ok=True)
        (repo_dir / "HEAD").write_text("ref: refs/heads/master\n")


class FakeCertIssuer:
    def __init__(self):
        self.calls: list[list[str]] = []

    def issue(self, domains: Sequence[str]) -> None:
        self.calls.append(list(domains))


class FakeWebServer:
    def __init__(self, valid: bool = True):
        self.valid = valid
        self.reloads = 0

    def validate(self) -> None:
        if not self.valid:
            raise ExternalToolError(["nginx", "-t"], "nginx: [emerg] bad config", returncode=1)

    def reload(self) -> None:
        self.validate()
        self.reloads += 1


class FakeServiceManager:
    def __init__(self):
        self.calls: list[tuple[str, ...]] = []

    def stop_and_disable(self, unit: str) -> None:
        self.calls.append(("disable", unit))

    def daemon_reload(self) -> None:
        self.calls.append(("daemon-reload",))


@pytest.fixture
def tmp_config(tmp_path: Path) -> SiteCtlConfig:
    """Return a SiteCtlConfig pointing at temp directories."""
    (tmp_path / "www").mkdir()
    (tmp_path / "nginx" / "sites-available").mkdir(parents=True)
    (tmp_path / "nginx" / "sites-enabled").mkdir(parents=True)
    (tmp_path / "systemd").mkdir()
    return SiteCtlConfig(
        sites_root=tmp_path / "www",
        available_dir=tmp_path / "nginx" / "sites-available",
        enabled_dir=tmp_path / "nginx" / "sites-enabled",
        systemd_dir=tmp_path / "systemd",
        git_root=tmp_path / "repo",
        backup_dir=tmp_path / "backups",
        service_group="www-data",
        host_id="test-host",
        log_dir=tmp_path / "log",
        audit_jsonl_path=tmp_path / "log" / "audit.jsonl",
        audit_db_path=tmp_path / "lib" / "audit.db",
    )


@pytest.fixture
def chown_calls():
    """Record shutil.chown calls instead of changing real ownership."""
    calls: list[tuple[str, str | None, str | None]] = []

    def _fake_chown(path, user=None, group=None):
        calls.append((str(path), user, group))

    with patch("sitectl.services.filesystem.shutil.chown", side_effect=_fake_chown):
        yield calls


@pytest.fixture
def make_manager(tmp_config: SiteCtlConfig, chown_calls):
    """Factory for a SiteManager wired to fakes."""

    def _make(**overrides) -> SiteManager:
        kwargs = dict(
            config=tmp_config,
            confirmer=FakeConfirmer(),
            privileges=FakePrivileges(),
            archiver=FakeArchiver(),
            repos=FakeRepoInitializer(),
            certs=FakeCertIssuer(),
            web_server=FakeWebServer(),
            services=FakeServiceManager(),
            console=Console(file=io.StringIO()),
            today=lambda: date(2024, 3, 1),
        )
        kwargs.update(overrides)
        return SiteManager(**kwargs)

    return _make


@pytest.fixture
def manager(make_manager) -> SiteManager:
    return make_manager()
