"""Jinja2 rendering for nginx server blocks and git hooks."""

from __future__ import annotations

import shlex
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sitectl_common import Site

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=select_autoescape([]),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["shquote"] = lambda value: shlex.quote(str(value))
    return env


def render_site_config(site: Site) -> str:
    """Render the nginx server block for the availability set."""
    env = _get_env()
    template = env.get_template("site.conf.j2")
    return template.render(site=site)


def render_post_receive(site: Site, branch: str) -> str:
    """Render the post-receive hook that checks *branch* out into the content dir."""
    env = _get_env()
    template = env.get_template("post-receive.j2")
    return template.render(site=site, branch=branch)


def write_file(path: Path, content: str, *, mode: int | None = None) -> None:
    """Write rendered content to disk."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    if mode is not None:
        path.chmod(mode)
