"""Site layout and status models."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from sitectl_common.constants import CONTENT_SUBDIR, LOGS_SUBDIR

SITE_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def is_valid_site_name(name: str) -> bool:
    """Site names become path components, so no separators or dot-dirs."""
    return bool(SITE_NAME_RE.match(name)) and name not in {".", ".."}


class SiteStatus(str, Enum):
    ENABLED = "Enabled"
    DISABLED = "Disabled"


class SiteEntry(BaseModel):
    """One row of the availability set."""

    name: str
    status: SiteStatus

    @property
    def enabled(self) -> bool:
        return self.status is SiteStatus.ENABLED


class Site(BaseModel):
    """Every filesystem location belonging to one site."""

    name: str
    site_dir: Path
    available_path: Path
    enabled_path: Path
    unit_path: Path
    repo_dir: Path
    backup_dir: Path

    @classmethod
    def from_roots(
        cls,
        name: str,
        *,
        sites_root: Path,
        available_dir: Path,
        enabled_dir: Path,
        systemd_dir: Path,
        git_root: Path,
        backup_dir: Path,
    ) -> Site:
        return cls(
            name=name,
            site_dir=sites_root / name,
            available_path=available_dir / name,
            enabled_path=enabled_dir / name,
            unit_path=systemd_dir / f"{name}.service",
            repo_dir=git_root / f"{name}.git",
            backup_dir=backup_dir / name,
        )

    @property
    def content_dir(self) -> Path:
        return self.site_dir / CONTENT_SUBDIR

    @property
    def logs_dir(self) -> Path:
        return self.site_dir / LOGS_SUBDIR

    @property
    def access_log(self) -> Path:
        return self.logs_dir / f"{self.name}_access.log"

    @property
    def error_log(self) -> Path:
        return self.logs_dir / f"{self.name}_error.log"

    @property
    def hook_path(self) -> Path:
        return self.repo_dir / "hooks" / "post-receive"

    @property
    def unit_name(self) -> str:
        return self.unit_path.name

    @property
    def exists(self) -> bool:
        return self.site_dir.is_dir()

    @property
    def is_available(self) -> bool:
        return self.available_path.exists()

    @property
    def is_enabled(self) -> bool:
        # A dangling link still occupies the enabled slot.
        return self.enabled_path.is_symlink() or self.enabled_path.exists()
