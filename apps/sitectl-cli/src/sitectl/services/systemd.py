"""systemd unit handling for per-site services."""

from __future__ import annotations

from typing import Protocol

from sitectl.services import shell


class ServiceManager(Protocol):
    def stop_and_disable(self, unit: str) -> None: ...

    def daemon_reload(self) -> None: ...


class SystemdServiceManager:
    def stop_and_disable(self, unit: str) -> None:
        # The unit may already be stopped or never enabled.
        shell.run(["systemctl", "disable", "--now", unit], check=False)

    def daemon_reload(self) -> None:
        shell.run(["systemctl", "daemon-reload"])
