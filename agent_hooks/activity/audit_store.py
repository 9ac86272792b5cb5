"""
Audit store: append-only history of every raw payload received.

Layout: <audit_dir>/<YYYY-MM-DD>/<session_id>.jsonl, one JSON record per
line with fields kind, session_id, payload, received_at. Nothing here
reads the records back; they exist for external replay tooling.
"""

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from ..errors import PersistenceError
from ..hooks.types import EventPayload
from ..logger import logger
from .files import append_text

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def session_filename(session_id: str) -> str:
    """Map an opaque session id onto a safe file name."""
    name = _UNSAFE_CHARS.sub("_", session_id).strip(".")
    return f"{name or 'unknown-session'}.jsonl"


class AuditStore:
    """Writes one snapshot per event to session-scoped daily files."""

    def __init__(self, audit_dir: Path, clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            audit_dir: Root directory for audit files
            clock: Source of the local time used for the day boundary
        """
        self.audit_dir = Path(audit_dir)
        self.clock = clock

    def path_for(self, session_id: str, now: Optional[datetime] = None) -> Path:
        now = now or self.clock()
        return self.audit_dir / now.strftime("%Y-%m-%d") / session_filename(session_id)

    def record(self, event: EventPayload) -> Optional[Path]:
        """
        Append a snapshot of the payload, tagged with its kind.

        A storage failure is logged and swallowed; the dispatch proceeds.

        Returns:
            The file written, or None if the write failed
        """
        now = self.clock()
        path = self.path_for(event.session_id, now)
        record = {
            "kind": event.kind.value,
            "session_id": event.session_id,
            "payload": event.raw,
            "received_at": now.isoformat(),
        }
        try:
            append_text(path, json.dumps(record, default=str) + "\n")
        except (OSError, TypeError, ValueError) as e:
            error = PersistenceError("audit", path, e)
            logger.error(f"[audit] {error}")
            return None
        return path
