"""sitectl common — configuration, constants and models for the site manager."""

from sitectl_common.constants import (
    AUDIT_DB_PATH,
    AUDIT_JSONL_PATH,
    BACKUP_DIR,
    CONFIG_PATH,
    DEPLOY_BRANCH,
    DIR_MODE,
    FILE_MODE,
    GIT_ROOT,
    LOG_DIR,
    NGINX_AVAILABLE_DIR,
    NGINX_ENABLED_DIR,
    SERVICE_GROUP,
    SITES_ROOT,
    SYSTEMD_DIR,
)
from sitectl_common.config import SiteCtlConfig
from sitectl_common.models.audit_event import AuditEvent
from sitectl_common.models.site import Site, SiteEntry, SiteStatus, is_valid_site_name

__all__ = [
    "AUDIT_DB_PATH",
    "AUDIT_JSONL_PATH",
    "AuditEvent",
    "BACKUP_DIR",
    "CONFIG_PATH",
    "DEPLOY_BRANCH",
    "DIR_MODE",
    "FILE_MODE",
    "GIT_ROOT",
    "LOG_DIR",
    "NGINX_AVAILABLE_DIR",
    "NGINX_ENABLED_DIR",
    "SERVICE_GROUP",
    "SITES_ROOT",
    "SYSTEMD_DIR",
    "Site",
    "SiteCtlConfig",
    "SiteEntry",
    "SiteStatus",
    "is_valid_site_name",
]
