"""Certbot certificate issuance through the nginx plugin."""

from __future__ import annotations

from typing import Protocol, Sequence

from sitectl.services import shell


class CertIssuer(Protocol):
    def issue(self, domains: Sequence[str]) -> None: ...


class CertbotIssuer:
    """Request certificates with ``certbot --nginx``.

    Without an email certbot runs interactively and asks the operator for
    anything it needs; with one it runs unattended.
    """

    def __init__(self, email: str = ""):
        self.email = email

    def command(self, domains: Sequence[str]) -> list[str]:
        cmd = ["certbot", "--nginx"]
        for domain in domains:
            cmd.extend(["-d", domain])
        if self.email:
            cmd.extend(["--non-interactive", "--agree-tos", "-m", self.email])
        return cmd

    def issue(self, domains: Sequence[str]) -> None:
        # Output goes straight to the terminal so prompts stay visible.
        shell.run(self.command(domains), capture=False)
