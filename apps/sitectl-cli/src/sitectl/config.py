"""CLI configuration — SiteCtlConfig resolved once per process."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from sitectl_common import SiteCtlConfig


@lru_cache(maxsize=None)
def get_config(path: Optional[Path] = None) -> SiteCtlConfig:
    """Return the SiteCtlConfig for *path* (resolved once, cached)."""
    return SiteCtlConfig.load(path)
