"""Site lifecycle operations behind the sitectl commands.

``SiteManager`` holds the configuration and every external capability it
needs (confirmation, privilege detection, tar, git, certbot, nginx,
systemd). The CLI builds one with the real adapters; tests build one with
fakes. Each operation either returns normally or raises a ``SiteCtlError``
subclass; turning those into exit codes is the CLI's job.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console

from sitectl_common import (
    DIR_MODE,
    FILE_MODE,
    Site,
    SiteCtlConfig,
    SiteEntry,
    SiteStatus,
    is_valid_site_name,
)
from sitectl.errors import (
    AlreadyExistsError,
    InvalidSiteNameError,
    PrivilegeError,
    SiteCtlError,
    SiteNotFoundError,
    UserAbortedError,
)
from sitectl.services import filesystem, renderer
from sitectl.services.archiver import Archiver, TarArchiver
from sitectl.services.certbot import CertbotIssuer, CertIssuer
from sitectl.services.git import GitRepoInitializer, RepoInitializer
from sitectl.services.nginx import NginxServer, WebServer
from sitectl.services.privileges import Privileges, ProcessPrivileges
from sitectl.services.prompt import Confirmer, TyperConfirmer
from sitectl.services.systemd import ServiceManager, SystemdServiceManager


@dataclass
class BackupReport:
    """Outcome of ``backup_all``: archive per site, or the error message."""

    archives: dict[str, Path] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class SiteManager:
    config: SiteCtlConfig
    confirmer: Confirmer = field(default_factory=TyperConfirmer)
    privileges: Privileges = field(default_factory=ProcessPrivileges)
    archiver: Archiver = field(default_factory=TarArchiver)
    repos: RepoInitializer = field(default_factory=GitRepoInitializer)
    certs: Optional[CertIssuer] = None
    web_server: WebServer = field(default_factory=NginxServer)
    services: ServiceManager = field(default_factory=SystemdServiceManager)
    console: Console = field(default_factory=Console)
    today: Callable[[], date] = date.today

    def __post_init__(self) -> None:
        if self.certs is None:
            self.certs = CertbotIssuer(email=self.config.certbot_email)

    # -- preconditions -----------------------------------------------------

    def require_root(self) -> None:
        if not self.privileges.is_root():
            raise PrivilegeError("This command must be run as root (try sudo).")

    def site(self, name: str) -> Site:
        if not is_valid_site_name(name):
            raise InvalidSiteNameError(name)
        return self.config.site(name)

    def _confirm(self, prompt: str) -> None:
        if not self.confirmer.confirm(prompt):
            raise UserAbortedError("Aborted.")

    def _step(self, n: int, total: int, message: str) -> None:
        self.console.print(f"[bold][{n}/{total}][/bold] {message}")

    # -- read-only ---------------------------------------------------------

    def list_sites(self) -> list[SiteEntry]:
        """Every available site in name order, with its enabled state."""
        available_dir = self.config.available_dir
        if not available_dir.is_dir():
            return []
        entries = []
        for path in sorted(available_dir.iterdir(), key=lambda p: p.name):
            site = self.config.site(path.name)
            status = SiteStatus.ENABLED if site.is_enabled else SiteStatus.DISABLED
            entries.append(SiteEntry(name=path.name, status=status))
        return entries

    # -- lifecycle ---------------------------------------------------------

    def new(self, name: str) -> Site:
        """Create the directory layout, log files and nginx config for a site."""
        self.require_root()
        site = self.site(name)
        user = self.privileges.invoking_user()

        self._step(1, 3, f"Creating {site.site_dir}")
        site.content_dir.mkdir(parents=True, exist_ok=True)
        site.logs_dir.mkdir(parents=True, exist_ok=True)
        filesystem.set_owner(site.content_dir, user, self.config.service_group)
        filesystem.set_id_bits(site.content_dir)

        self._step(2, 3, "Creating log files")
        site.access_log.touch(exist_ok=True)
        site.error_log.touch(exist_ok=True)

        if site.is_available:
            self._step(3, 3, f"Keeping existing config {site.available_path}")
        else:
            self._step(3, 3, f"Writing nginx config {site.available_path}")
            renderer.write_file(site.available_path, renderer.render_site_config(site))
        return site

    def enable(self, name: str) -> Site:
        """Link an available site into the enabled set and reload nginx."""
        self.require_root()
        site = self.site(name)
        if not site.is_available:
            raise SiteNotFoundError(f"No available config for {name} at {site.available_path}")
        if site.is_enabled:
            raise AlreadyExistsError(f"{site.enabled_path} already exists")

        site.enabled_path.parent.mkdir(parents=True, exist_ok=True)
        site.enabled_path.symlink_to(site.available_path)
        try:
            self.web_server.reload()
        except SiteCtlError:
            # Leave nginx with the config it had before.
            site.enabled_path.unlink()
            raise
        return site

    def disable(self, name: str) -> bool:
        """Ask, then unlink a site from the enabled set.

        Returns False when the site was already disabled.
        """
        self.require_root()
        site = self.site(name)
        self._confirm(f"Disable {name}?")
        return self._unlink_enabled(site)

    def _unlink_enabled(self, site: Site) -> bool:
        if not site.is_enabled:
            return False
        site.enabled_path.unlink()
        self.web_server.reload()
        return True

    def delete(self, name: str, *, backup: bool = True) -> Optional[Path]:
        """Back up (optionally) and remove every trace of a site.

        Returns the path of the backup archive, if one was taken.
        """
        self.require_root()
        site = self.site(name)
        if not site.exists:
            raise SiteNotFoundError("Site does not exist.")
        self._confirm(f"Delete {name} and all of its content?")

        total = 5
        archive = None
        if backup:
            self._step(1, total, "Backing up site")
            archive = self._archive(site)
        else:
            self._step(1, total, "Skipping backup (--no-backup)")

        self._step(2, total, f"Removing {site.site_dir}")
        shutil.rmtree(site.site_dir)

        self._step(3, total, "Disabling site")
        self._unlink_enabled(site)

        self._step(4, total, "Removing nginx config")
        if site.available_path.exists():
            site.available_path.unlink()

        self._step(5, total, "Removing service unit")
        if site.unit_path.exists():
            self.services.stop_and_disable(site.unit_name)
            site.unit_path.unlink()
            self.services.daemon_reload()
        return archive

    # -- backups -----------------------------------------------------------

    def backup_path(self, site: Site) -> Path:
        stamp = self.today().isoformat()
        return site.backup_dir / f"{site.name}_{stamp}.tar.gz"

    def _archive(self, site: Site) -> Path:
        archive = self.backup_path(site)
        self.archiver.create(site.site_dir, archive)
        return archive

    def backup(self, name: str) -> Path:
        """Archive a site's directory tree into the backup directory."""
        self.require_root()
        site = self.site(name)
        if not site.exists:
            raise SiteNotFoundError("Site does not exist.")
        return self._archive(site)

    def backup_all(self) -> BackupReport:
        """Back up every available site, continuing past failures."""
        self.require_root()
        report = BackupReport()
        for entry in self.list_sites():
            try:
                report.archives[entry.name] = self.backup(entry.name)
            except (SiteCtlError, OSError) as exc:
                report.failures[entry.name] = str(exc)
        return report

    # -- deploy / maintenance ----------------------------------------------

    def repo(self, name: str) -> Site:
        """Create ``<name>.git`` with a post-receive hook deploying into the site."""
        site = self.site(name)
        if site.repo_dir.exists():
            raise AlreadyExistsError(f"Repository already exists: {site.repo_dir}")

        site.repo_dir.mkdir(parents=True)
        filesystem.set_id_bits(site.repo_dir)
        self.repos.init_bare(site.repo_dir)

        hook = renderer.render_post_receive(site, self.config.deploy_branch)
        renderer.write_file(site.hook_path, hook, mode=0o755)

        filesystem.chown_tree(site.repo_dir, self.privileges.invoking_user())
        return site

    def permissions(self, name: str) -> int:
        """Reset ownership and modes across a site's content directory."""
        self.require_root()
        site = self.site(name)
        if not site.content_dir.is_dir():
            raise SiteNotFoundError("Site does not exist.")
        return filesystem.apply_permissions(
            site.content_dir,
            user=self.privileges.invoking_user(),
            group=self.config.service_group,
            dir_mode=DIR_MODE,
            file_mode=FILE_MODE,
        )

    def cert(self, name: str) -> list[str]:
        """Request a certificate for the site and its www subdomain."""
        self.require_root()
        site = self.site(name)
        domains = [site.name, f"www.{site.name}"]
        self.certs.issue(domains)
        return domains
