"""
Hook types and data structures for the lifecycle hook dispatcher.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..errors import InvalidDecisionError


class HookEvent(Enum):
    """
    Lifecycle events emitted by the host agent.

    The value is the name the host uses on the wire:
    - SessionStart: The host session begins (or resumes / is cleared)
    - PreToolUse: Before the host executes a tool; may be denied
    - PostToolUse: Immediately after a tool finishes
    - Notification: The host surfaces a notification to the user
    - Stop: The main agent finishes its turn
    - SubagentStop: A sub-agent finishes
    - UserPromptSubmit: After the user submits a prompt; may be blocked
    - PreCompact: Before the host compacts its context
    """
    SessionStart = "SessionStart"
    PreToolUse = "PreToolUse"
    PostToolUse = "PostToolUse"
    Notification = "Notification"
    Stop = "Stop"
    SubagentStop = "SubagentStop"
    UserPromptSubmit = "UserPromptSubmit"
    PreCompact = "PreCompact"


class PermissionDecision(Enum):
    allow = "allow"
    deny = "deny"
    ask = "ask"


class CompactTrigger(Enum):
    auto = "auto"
    manual = "manual"


@dataclass(frozen=True)
class EventPayload:
    """
    Fields common to every event.

    Attributes:
        session_id: Opaque host session identity
        raw: The payload exactly as received, kept for the audit store
    """
    session_id: str
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    kind = None  # set on each subclass

    def to_dict(self) -> Dict[str, Any]:
        """Convert the typed fields to a dictionary (raw payload excluded)."""
        data = {"kind": self.kind.value, "session_id": self.session_id}
        for name in self.__dataclass_fields__:
            if name in ("session_id", "raw"):
                continue
            value = getattr(self, name)
            data[name] = value.value if isinstance(value, Enum) else value
        return data


@dataclass(frozen=True)
class SessionStartPayload(EventPayload):
    source: str = ""

    kind = HookEvent.SessionStart


@dataclass(frozen=True)
class PreToolUsePayload(EventPayload):
    tool_name: str = ""
    tool_input: Dict[str, Any] = field(default_factory=dict)

    kind = HookEvent.PreToolUse


@dataclass(frozen=True)
class PostToolUsePayload(EventPayload):
    tool_name: str = ""
    tool_input: Dict[str, Any] = field(default_factory=dict)
    tool_response: Any = None

    kind = HookEvent.PostToolUse


@dataclass(frozen=True)
class NotificationPayload(EventPayload):
    message: str = ""

    kind = HookEvent.Notification


@dataclass(frozen=True)
class StopPayload(EventPayload):
    stop_hook_active: bool = False

    kind = HookEvent.Stop


@dataclass(frozen=True)
class SubagentStopPayload(EventPayload):
    stop_hook_active: bool = False

    kind = HookEvent.SubagentStop


@dataclass(frozen=True)
class UserPromptSubmitPayload(EventPayload):
    prompt: str = ""

    kind = HookEvent.UserPromptSubmit


@dataclass(frozen=True)
class PreCompactPayload(EventPayload):
    trigger: CompactTrigger = CompactTrigger.auto

    kind = HookEvent.PreCompact


PAYLOAD_TYPES = {
    HookEvent.SessionStart: SessionStartPayload,
    HookEvent.PreToolUse: PreToolUsePayload,
    HookEvent.PostToolUse: PostToolUsePayload,
    HookEvent.Notification: NotificationPayload,
    HookEvent.Stop: StopPayload,
    HookEvent.SubagentStop: SubagentStopPayload,
    HookEvent.UserPromptSubmit: UserPromptSubmitPayload,
    HookEvent.PreCompact: PreCompactPayload,
}


@dataclass
class HookResult:
    """
    Decision returned by a hook handler.

    An empty HookResult means "continue normally". Which fields the host
    ever sees depends on the event kind; the encoder drops the rest.

    Attributes:
        permission_decision: allow / deny / ask (PreToolUse)
        permission_reason: Explanation, required when denying (PreToolUse)
        decision: "block" to reject the prompt (UserPromptSubmit)
        reason: Explanation, required when blocking (UserPromptSubmit)
        context_files: Glob patterns to add as context (UserPromptSubmit)
    """
    permission_decision: Optional[PermissionDecision] = None
    permission_reason: Optional[str] = None
    decision: Optional[str] = None
    reason: Optional[str] = None
    context_files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            'permission_decision': (
                self.permission_decision.value if self.permission_decision else None
            ),
            'permission_reason': self.permission_reason,
            'decision': self.decision,
            'reason': self.reason,
            'context_files': list(self.context_files),
        }

    @property
    def is_continue(self) -> bool:
        return (
            self.permission_decision is None
            and self.decision is None
            and not self.context_files
        )

    def validate(self, kind: HookEvent) -> None:
        """
        Check the decision is well formed for the given event kind.

        Only PreToolUse may carry a permission decision, and only
        UserPromptSubmit may block or add context files.

        Raises:
            InvalidDecisionError: On a field the kind cannot carry, a denial
                or block without a reason, or a decision value outside its
                enumeration
        """
        if kind is not HookEvent.PreToolUse and (
            self.permission_decision is not None or self.permission_reason
        ):
            raise InvalidDecisionError(f"{kind.value} cannot carry a permission decision")
        if kind is not HookEvent.UserPromptSubmit and (
            self.decision is not None or self.reason or self.context_files
        ):
            raise InvalidDecisionError(f"{kind.value} cannot block or add context files")

        if self.permission_decision is not None:
            if not isinstance(self.permission_decision, PermissionDecision):
                raise InvalidDecisionError(
                    f"permission_decision must be a PermissionDecision, got {self.permission_decision!r}"
                )
            if self.permission_decision is PermissionDecision.deny and not self.permission_reason:
                raise InvalidDecisionError("A deny decision requires a reason")

        if self.decision is not None:
            if self.decision != "block":
                raise InvalidDecisionError(f"Unknown decision {self.decision!r}")
            if not self.reason:
                raise InvalidDecisionError("A block decision requires a reason")

        if not all(isinstance(pattern, str) and pattern for pattern in self.context_files):
            raise InvalidDecisionError("context_files must be non-empty strings")

    @classmethod
    def cont(cls) -> 'HookResult':
        """Create a result that lets the host continue normally."""
        return cls()

    @classmethod
    def allow(cls, reason: Optional[str] = None) -> 'HookResult':
        """Create a result that explicitly allows a tool call."""
        return cls(permission_decision=PermissionDecision.allow, permission_reason=reason)

    @classmethod
    def deny(cls, reason: str) -> 'HookResult':
        """Create a result that denies a tool call."""
        return cls(permission_decision=PermissionDecision.deny, permission_reason=reason)

    @classmethod
    def ask(cls, reason: Optional[str] = None) -> 'HookResult':
        """Create a result that asks the user to confirm a tool call."""
        return cls(permission_decision=PermissionDecision.ask, permission_reason=reason)

    @classmethod
    def block(cls, reason: str) -> 'HookResult':
        """Create a result that blocks a submitted prompt."""
        return cls(decision="block", reason=reason)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HookResult':
        """Build a result from a handler's dict return value."""
        data = dict(data)
        permission = data.pop('permission_decision', None)
        if permission is not None and not isinstance(permission, PermissionDecision):
            try:
                permission = PermissionDecision(permission)
            except ValueError as e:
                raise InvalidDecisionError(f"Unknown permission decision {permission!r}") from e
        try:
            return cls(permission_decision=permission, **data)
        except TypeError as e:
            raise InvalidDecisionError(f"Unexpected decision fields: {e}") from e
