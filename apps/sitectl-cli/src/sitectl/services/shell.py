"""Subprocess wrapper shared by the external-tool adapters."""

from __future__ import annotations

import subprocess
from typing import Sequence

from sitectl.errors import ExternalToolError


def run(
    cmd: Sequence[str], *, check: bool = True, capture: bool = True
) -> subprocess.CompletedProcess[str]:
    """Run *cmd*; a non-zero exit or missing binary raises ExternalToolError."""
    try:
        return subprocess.run(
            list(cmd),
            check=check,
            capture_output=capture,
            text=True,
        )
    except subprocess.CalledProcessError as exc:
        raise ExternalToolError(cmd, exc.stderr or "", returncode=exc.returncode) from exc
    except FileNotFoundError as exc:
        raise ExternalToolError(cmd, f"{cmd[0]}: command not found") from exc
