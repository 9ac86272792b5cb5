"""
Dispatcher: runs one host event through the decision pipeline.

    decode -> audit record -> handler -> derived logs -> encode

The decision is only returned once every write has finished or failed,
because the host may end the process as soon as it has its answer.
Only DecodeError escapes; everything after decoding is contained.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..activity.activity_log import ActivityLog
from ..activity.audit_store import AuditStore
from ..config import HookConfig
from ..logger import logger
from .decoder import decode_event
from .encoder import encode_decision
from .handlers import build_default_manager
from .manager import HookManager
from .types import EventPayload


class Dispatcher:
    """Wires the decoder, audit store, handler registry, activity log and encoder."""

    def __init__(self, manager: HookManager, audit_store: AuditStore, activity_log: ActivityLog):
        """
        Args:
            manager: Registry with a handler bound for every kind

        Raises:
            RegistryError: If any kind is unbound
        """
        manager.verify()
        self.manager = manager
        self.audit_store = audit_store
        self.activity_log = activity_log

    def dispatch(self, raw: Any, kind_hint: Optional[str] = None) -> Dict[str, Any]:
        """
        Process one host payload and return the encoded decision.

        Args:
            raw: Parsed JSON payload from the host
            kind_hint: Event kind named outside the payload, if any

        Returns:
            The host response; {} means "continue normally"

        Raises:
            DecodeError: If the payload cannot be decoded
        """
        event = decode_event(raw, kind_hint)
        logger.info(f"[hooks] {event.kind.value} for session {event.session_id}")

        self._record_audit(event)
        result = self.manager.dispatch(event)
        self._record_activity(event)

        response = encode_decision(event.kind, result)
        if response:
            logger.info(f"[hooks] {event.kind.value} decision: {response}")
        return response

    def _record_audit(self, event: EventPayload) -> None:
        try:
            self.audit_store.record(event)
        except Exception as e:
            logger.error(f"[audit] Unexpected failure recording {event.kind.value}: {e}")

    def _record_activity(self, event: EventPayload) -> None:
        try:
            self.activity_log.record(event)
        except Exception as e:
            logger.error(f"[activity] Unexpected failure logging {event.kind.value}: {e}")


def build_dispatcher(config: HookConfig, clock: Callable[[], datetime] = datetime.now) -> Dispatcher:
    """Create a Dispatcher with the default handlers and file sinks for a config."""
    return Dispatcher(
        manager=build_default_manager(config),
        audit_store=AuditStore(config.audit_dir, clock=clock),
        activity_log=ActivityLog(config, clock=clock),
    )
