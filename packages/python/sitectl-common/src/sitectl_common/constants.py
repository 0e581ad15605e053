"""Shared constants for sitectl."""

from pathlib import Path

# Config file (env-style KEY=VALUE lines)
CONFIG_PATH = Path("/etc/sitectl/sitectl.env")
ENV_PREFIX = "SITECTL_"

# Site content
SITES_ROOT = Path("/var/www")
CONTENT_SUBDIR = "site"
LOGS_SUBDIR = "logs"
SERVICE_GROUP = "www-data"

# NGINX available/enabled sets
NGINX_AVAILABLE_DIR = Path("/etc/nginx/sites-available")
NGINX_ENABLED_DIR = Path("/etc/nginx/sites-enabled")

# systemd units
SYSTEMD_DIR = Path("/etc/systemd/system")

# Git deploy repositories
GIT_ROOT = Path("/var/repo")
DEPLOY_BRANCH = "master"

# Backups (kept outside the site tree)
BACKUP_DIR = Path("/var/backups/sitectl")

# Audit / logging
LOG_DIR = Path("/var/log/sitectl")
AUDIT_JSONL_PATH = LOG_DIR / "audit.jsonl"
AUDIT_DB_PATH = Path("/var/lib/sitectl/audit.db")

# Permissions applied by `sitectl permissions`
DIR_MODE = 0o755
FILE_MODE = 0o644
