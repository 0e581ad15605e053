"""Root Typer application for sitectl."""

from __future__ import annotations

import dataclasses
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sitectl_common import AuditEvent
from sitectl.audit import audit
from sitectl.config import get_config
from sitectl.errors import PartialFailureError, SiteCtlError
from sitectl.manager import SiteManager
from sitectl.services.prompt import AssumeYes

app = typer.Typer(
    name="sitectl",
    help="Provision and manage nginx-hosted sites on this server.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def build_manager(config_path: Optional[Path] = None) -> SiteManager:
    return SiteManager(config=get_config(config_path), console=console)


def _manager(ctx: typer.Context, *, yes: bool = False) -> SiteManager:
    manager: SiteManager = ctx.obj
    if yes:
        manager = dataclasses.replace(manager, confirmer=AssumeYes())
    return manager


@contextmanager
def _operation(
    manager: SiteManager,
    action: str,
    target: str = "",
    *,
    privileged: bool = True,
    **params: Any,
) -> Generator[Optional[AuditEvent], None, None]:
    """Run one command: root check, audit record, error-to-exit-code translation.

    Only privileged commands are audited, and get the audit event to
    attach results to; the audit files live in root-owned directories.
    """
    try:
        if privileged:
            manager.require_root()
            with audit(manager.config, action, target=target, **params) as event:
                yield event
        else:
            yield None
    except SiteCtlError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(exc.exit_code) from None
    except OSError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(1) from None


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file (KEY=VALUE lines)", dir_okay=False
    ),
) -> None:
    """Provision and manage nginx-hosted sites on this server."""
    if ctx.obj is None:
        ctx.obj = build_manager(config)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


@app.command(name="help")
def help_(ctx: typer.Context) -> None:
    """Show this message."""
    typer.echo(ctx.find_root().get_help())


@app.command(name="list")
def list_sites(ctx: typer.Context) -> None:
    """List available sites and whether they are enabled."""
    manager = _manager(ctx)
    with _operation(manager, "site.list", privileged=False):
        entries = manager.list_sites()

    if not entries:
        console.print("No sites found.")
        return

    table = Table(title="Sites")
    table.add_column("Site", style="cyan")
    table.add_column("Status")
    for entry in entries:
        style = "green" if entry.enabled else "yellow"
        table.add_row(entry.name, f"[{style}]{entry.status.value}[/{style}]")
    console.print(table)


@app.command()
def new(ctx: typer.Context, site: str = typer.Argument(help="Site name")) -> None:
    """Create directories, log files and nginx config for a new site."""
    manager = _manager(ctx)
    with _operation(manager, "site.new", target=site):
        created = manager.new(site)
    console.print(f"\n[green bold]Done![/green bold] {site} created at {created.site_dir}")
    console.print(f"Enable it with: sitectl enable {site}")


@app.command()
def enable(ctx: typer.Context, site: str = typer.Argument(help="Site name")) -> None:
    """Link a site into sites-enabled and reload nginx."""
    manager = _manager(ctx)
    with _operation(manager, "site.enable", target=site):
        manager.enable(site)
    console.print(f"[green]{site} enabled.[/green]")


@app.command()
def disable(
    ctx: typer.Context,
    site: str = typer.Argument(help="Site name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Unlink a site from sites-enabled and reload nginx."""
    manager = _manager(ctx, yes=yes)
    with _operation(manager, "site.disable", target=site):
        changed = manager.disable(site)
    if changed:
        console.print(f"[yellow]{site} disabled.[/yellow]")
    else:
        console.print(f"{site} is already disabled.")


@app.command()
def delete(
    ctx: typer.Context,
    site: str = typer.Argument(help="Site name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    no_backup: bool = typer.Option(False, "--no-backup", help="Do not archive the site first"),
) -> None:
    """Back up, then remove a site's content, config and service unit."""
    manager = _manager(ctx, yes=yes)
    with _operation(manager, "site.delete", target=site, backup=not no_backup) as event:
        archive = manager.delete(site, backup=not no_backup)
        if archive is not None:
            event.params["archive"] = str(archive)
    if archive is not None:
        console.print(f"  Backup: {archive}")
    console.print(f"\n[green bold]Done![/green bold] {site} deleted.")


@app.command()
def backup(ctx: typer.Context, site: str = typer.Argument(help="Site name")) -> None:
    """Archive a site's directory tree."""
    manager = _manager(ctx)
    with _operation(manager, "site.backup", target=site) as event:
        archive = manager.backup(site)
        event.params["archive"] = str(archive)
    console.print(f"[green]Backup written:[/green] {archive}")


@app.command(name="backup-all")
def backup_all(ctx: typer.Context) -> None:
    """Archive every available site, continuing past failures."""
    manager = _manager(ctx)
    with _operation(manager, "site.backup-all") as event:
        report = manager.backup_all()
        for name, archive in report.archives.items():
            console.print(f"  [green]ok[/green]     {name}: {archive}")
        for name, error in report.failures.items():
            console.print(f"  [red]failed[/red] {name}: {escape(error)}")
        console.print(
            f"\n{len(report.archives)} succeeded, {len(report.failures)} failed."
        )
        event.params["sites"] = len(report.archives) + len(report.failures)
        if not report.ok:
            event.params["failed"] = sorted(report.failures)
            raise PartialFailureError(
                f"Backup failed for: {', '.join(sorted(report.failures))}"
            )


@app.command()
def repo(ctx: typer.Context, site: str = typer.Argument(help="Site name")) -> None:
    """Create a bare git repository that deploys into the site on push."""
    manager = _manager(ctx)
    with _operation(manager, "site.repo", target=site, privileged=False):
        created = manager.repo(site)
    console.print(f"[green]Repository created:[/green] {created.repo_dir}")
    console.print(f"Push {manager.config.deploy_branch} to deploy into {created.content_dir}")


@app.command()
def permissions(ctx: typer.Context, site: str = typer.Argument(help="Site name")) -> None:
    """Reset ownership and permissions across a site's content directory."""
    manager = _manager(ctx)
    with _operation(manager, "site.permissions", target=site):
        count = manager.permissions(site)
    console.print(f"[green]Permissions reset on {count} paths.[/green]")


@app.command()
def cert(ctx: typer.Context, site: str = typer.Argument(help="Site name")) -> None:
    """Request a Let's Encrypt certificate for the site and www subdomain."""
    manager = _manager(ctx)
    with _operation(manager, "cert.issue", target=site):
        domains = manager.cert(site)
    console.print(f"[green]Certificate issued for {', '.join(domains)}[/green]")


if __name__ == "__main__":
    app()
