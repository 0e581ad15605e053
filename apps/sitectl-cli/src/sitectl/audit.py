"""Dual-write audit trail for privileged commands: JSONL file + SQLite database.

Each command writes one record when it finishes, whatever the outcome:
``success``, ``aborted`` (the operator declined a prompt) or ``failure``,
together with the exit code the CLI returns for it.
"""

from __future__ import annotations

import getpass
import json
import os
import sqlite3
import time
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Any, Generator

from sitectl_common import AuditEvent, SiteCtlConfig
from sitectl.errors import SiteCtlError, UserAbortedError

_SCHEMA = """
CREATE TABLE IF NOT EXISTS audit_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    host_id TEXT NOT NULL,
    actor TEXT NOT NULL,
    action TEXT NOT NULL,
    site TEXT NOT NULL DEFAULT '',
    params TEXT NOT NULL DEFAULT '{}',
    result TEXT NOT NULL DEFAULT 'success',
    exit_code INTEGER NOT NULL DEFAULT 0,
    error TEXT,
    duration_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_audit_timestamp ON audit_logs(timestamp);
CREATE INDEX IF NOT EXISTS idx_audit_site ON audit_logs(site, timestamp);
"""


def _get_actor() -> str:
    return os.environ.get("SITECTL_ACTOR") or os.environ.get("SUDO_USER") or getpass.getuser()


def _write_jsonl(path: Path, event: AuditEvent) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a") as f:
        f.write(event.to_jsonl() + "\n")


def _write_sqlite(db_path: Path, event: AuditEvent) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    row = event.model_dump(mode="json")
    with closing(sqlite3.connect(str(db_path))) as conn, conn:
        conn.executescript(_SCHEMA)
        conn.execute(
            """INSERT INTO audit_logs
               (timestamp, host_id, actor, action, site, params,
                result, exit_code, error, duration_ms)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                row["timestamp"],
                row["host_id"],
                row["actor"],
                row["action"],
                row["target"],
                json.dumps(row["params"], sort_keys=True),
                row["result"],
                row["exit_code"],
                row["error"],
                row["duration_ms"],
            ),
        )


def log_event(cfg: SiteCtlConfig, event: AuditEvent) -> None:
    """Write an audit event to both JSONL and SQLite."""
    _write_jsonl(cfg.audit_jsonl_path, event)
    _write_sqlite(cfg.audit_db_path, event)


@contextmanager
def audit(
    cfg: SiteCtlConfig, action: str, target: str = "", **params: Any
) -> Generator[AuditEvent, None, None]:
    """Record one command run: timing, outcome and exit code.

    The yielded event's ``params`` may be extended by the caller, e.g. with
    the archive a backup produced.
    """
    event = AuditEvent(
        host_id=cfg.host_id,
        actor=_get_actor(),
        action=action,
        target=target,
        params=params,
    )
    start = time.monotonic()
    try:
        yield event
    except UserAbortedError as exc:
        event.result = "aborted"
        event.exit_code = exc.exit_code
        raise
    except SiteCtlError as exc:
        event.result = "failure"
        event.exit_code = exc.exit_code
        event.error = str(exc)
        raise
    except Exception as exc:
        event.result = "failure"
        event.exit_code = 1
        event.error = str(exc)
        raise
    finally:
        event.duration_ms = int((time.monotonic() - start) * 1000)
        log_event(cfg, event)
