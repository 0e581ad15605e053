"""Effective privilege and invoking-user detection."""

from __future__ import annotations

import getpass
import os
from typing import Protocol


class Privileges(Protocol):
    def is_root(self) -> bool: ...

    def invoking_user(self) -> str: ...


class ProcessPrivileges:
    """Read privilege state from the running process.

    Under sudo the invoking user is the one who ran sudo, not root.
    """

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def invoking_user(self) -> str:
        return os.environ.get("SUDO_USER") or getpass.getuser()
