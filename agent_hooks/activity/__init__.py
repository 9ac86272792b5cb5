"""
Persistence for hook events.

- Audit store: raw payload per event, per session and day (JSONL)
- Structured daily log: one JSON line per prompt or tool use
- Narrative daily document: markdown, kept in two locations
"""

from .audit_store import AuditStore
from .jsonl_log import StructuredLog
from .narrative import NarrativeLog
from .activity_log import ActivityLog

__all__ = ["AuditStore", "StructuredLog", "NarrativeLog", "ActivityLog"]
