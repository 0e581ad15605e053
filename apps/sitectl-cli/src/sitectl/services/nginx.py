"""NGINX config validation and reload."""

from __future__ import annotations

from typing import Protocol

from sitectl.errors import ExternalToolError
from sitectl.services import shell


class WebServer(Protocol):
    def validate(self) -> None: ...

    def reload(self) -> None: ...


class NginxServer:
    """The host's nginx, managed through systemd."""

    def __init__(self, unit: str = "nginx"):
        self.unit = unit

    def validate(self) -> None:
        """Run nginx -t. Raises ExternalToolError on failure."""
        cmd = ["nginx", "-t"]
        result = shell.run(cmd, check=False)
        if result.returncode != 0:
            raise ExternalToolError(cmd, result.stderr, returncode=result.returncode)

    def reload(self) -> None:
        """Validate config, then reload NGINX."""
        self.validate()
        shell.run(["systemctl", "reload", self.unit])
