"""Ownership and permission helpers."""

from __future__ import annotations

import os
import shutil
import stat
from pathlib import Path
from typing import Optional

from sitectl.errors import OwnershipError

_ID_BITS = stat.S_ISUID | stat.S_ISGID


def set_owner(path: Path, user: str, group: Optional[str] = None) -> None:
    try:
        shutil.chown(str(path), user=user, group=group)
    except LookupError as exc:
        raise OwnershipError(f"Cannot set owner of {path}: {exc}") from exc


def set_id_bits(path: Path) -> None:
    """Equivalent of ``chmod ug+s``."""
    mode = stat.S_IMODE(path.stat().st_mode)
    path.chmod(mode | _ID_BITS)


def chown_tree(root: Path, user: str, group: Optional[str] = None) -> None:
    """Recursively chown *root*, leaving symlinks alone."""
    set_owner(root, user, group)
    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        for name in dirnames + filenames:
            path = Path(dirpath) / name
            if path.is_symlink():
                continue
            set_owner(path, user, group)


def apply_permissions(
    root: Path,
    *,
    user: str,
    group: str,
    dir_mode: int,
    file_mode: int,
) -> int:
    """Set owner and modes on every directory and file under *root*.

    Directories keep any setuid/setgid bits they already carry. Symlinks are
    neither followed nor modified. Returns the number of paths updated.
    """
    count = 0

    def _apply(path: Path, is_dir: bool) -> None:
        nonlocal count
        set_owner(path, user, group)
        if is_dir:
            current = stat.S_IMODE(path.stat().st_mode)
            path.chmod(dir_mode | (current & _ID_BITS))
        else:
            path.chmod(file_mode)
        count += 1

    _apply(root, True)
    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        base = Path(dirpath)
        for name in dirnames:
            path = base / name
            if not path.is_symlink():
                _apply(path, True)
        for name in filenames:
            path = base / name
            if not path.is_symlink():
                _apply(path, False)
    return count
