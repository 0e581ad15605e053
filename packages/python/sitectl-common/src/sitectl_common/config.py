"""Central configuration for sitectl, read from the environment and an env file."""

from __future__ import annotations

import os
import socket
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sitectl_common.constants import (
    AUDIT_DB_PATH,
    AUDIT_JSONL_PATH,
    BACKUP_DIR,
    CONFIG_PATH,
    DEPLOY_BRANCH,
    ENV_PREFIX,
    GIT_ROOT,
    LOG_DIR,
    NGINX_AVAILABLE_DIR,
    NGINX_ENABLED_DIR,
    SERVICE_GROUP,
    SITES_ROOT,
    SYSTEMD_DIR,
)
from sitectl_common.models.site import Site


class SiteCtlConfig(BaseSettings):
    """Runtime configuration resolved once at startup.

    Every field can be set as ``SITECTL_<FIELD>`` in the environment or in
    the env file; the environment wins over the file.
    """

    sites_root: Path = SITES_ROOT
    available_dir: Path = NGINX_AVAILABLE_DIR
    enabled_dir: Path = NGINX_ENABLED_DIR
    systemd_dir: Path = SYSTEMD_DIR
    git_root: Path = GIT_ROOT
    backup_dir: Path = BACKUP_DIR
    service_group: str = SERVICE_GROUP
    deploy_branch: str = DEPLOY_BRANCH
    certbot_email: str = ""
    host_id: str = Field(default_factory=socket.gethostname)
    log_dir: Path = LOG_DIR
    audit_jsonl_path: Path = AUDIT_JSONL_PATH
    audit_db_path: Path = AUDIT_DB_PATH

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=CONFIG_PATH,
        extra="ignore",
    )

    @classmethod
    def load(cls, path: Optional[Path] = None) -> SiteCtlConfig:
        """Build a config from *path* (or ``$SITECTL_CONFIG``) and the environment.

        A missing file is not an error.
        """
        if path is None:
            path = Path(os.environ.get(f"{ENV_PREFIX}CONFIG", CONFIG_PATH))
        return cls(_env_file=path)

    def site(self, name: str) -> Site:
        """Return the on-disk layout for site *name*."""
        return Site.from_roots(
            name,
            sites_root=self.sites_root,
            available_dir=self.available_dir,
            enabled_dir=self.enabled_dir,
            systemd_dir=self.systemd_dir,
            git_root=self.git_root,
            backup_dir=self.backup_dir,
        )
