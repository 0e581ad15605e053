"""Interactive confirmation."""

from __future__ import annotations

from typing import Protocol

import typer


class Confirmer(Protocol):
    def confirm(self, prompt: str) -> bool: ...


class TyperConfirmer:
    """Ask on the terminal; an empty answer counts as yes."""

    def confirm(self, prompt: str) -> bool:
        return typer.confirm(prompt, default=True)


class AssumeYes:
    """Used for ``--yes``."""

    def confirm(self, prompt: str) -> bool:
        return True
