"""Site backups via tar."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from sitectl.services import shell


class Archiver(Protocol):
    def create(self, source_dir: Path, archive_path: Path) -> None: ...


class TarArchiver:
    """Write gzip-compressed tarballs with ``tar -czf``.

    Members are stored relative to the parent of *source_dir*, so the
    archive unpacks to a single ``<site>/`` directory.
    """

    def create(self, source_dir: Path, archive_path: Path) -> None:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        shell.run(
            [
                "tar", "-czf", str(archive_path),
                "-C", str(source_dir.parent),
                source_dir.name,
            ]
        )
