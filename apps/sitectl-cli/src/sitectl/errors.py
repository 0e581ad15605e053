"""Custom exceptions for sitectl."""

from __future__ import annotations

from typing import Sequence


class SiteCtlError(Exception):
    """Base exception for all sitectl operations."""

    def __init__(self, message: str, *, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class PrivilegeError(SiteCtlError):
    """Command needs root and the process is not running as root."""


class UserAbortedError(SiteCtlError):
    """Operator declined a confirmation prompt."""


class SiteNotFoundError(SiteCtlError):
    """Site directory or availability entry does not exist."""


class AlreadyExistsError(SiteCtlError):
    """Refusing to create over an existing entry."""


class InvalidSiteNameError(SiteCtlError):
    """Site name cannot be used as a path component."""

    def __init__(self, name: str):
        super().__init__(f"Invalid site name: {name!r}", exit_code=2)


class ExternalToolError(SiteCtlError):
    """An external program (tar, git, certbot, nginx, systemctl) failed."""

    def __init__(self, cmd: Sequence[str], stderr: str = "", *, returncode: int | None = None):
        message = f"Command failed: {' '.join(cmd)}"
        if stderr.strip():
            message += f"\nstderr: {stderr.strip()}"
        super().__init__(message)
        self.cmd = list(cmd)
        self.stderr = stderr
        self.returncode = returncode


class PartialFailureError(SiteCtlError):
    """A batch operation finished but some items failed."""


class OwnershipError(SiteCtlError):
    """Owner user or group does not exist on this host."""
