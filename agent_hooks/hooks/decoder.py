"""
Payload decoder: turns one raw host payload into a typed EventPayload.

The decoder never guesses. A missing or unknown kind, or a missing
kind-specific field, raises DecodeError and no handler runs.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..errors import DecodeError
from .types import CompactTrigger, EventPayload, HookEvent, PAYLOAD_TYPES

# Discriminant fields, in lookup order
KIND_FIELDS = ("hook_type", "hook_event_name")


def _require(raw: Mapping[str, Any], name: str, expected: Tuple[type, ...], kind: HookEvent) -> Any:
    if name not in raw or raw[name] is None:
        raise DecodeError(f"{kind.value} payload is missing required field '{name}'")
    value = raw[name]
    # bool is an int subclass; never accept it where a str or dict is expected
    if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
        names = "/".join(t.__name__ for t in expected)
        raise DecodeError(
            f"{kind.value} field '{name}' must be {names}, got {type(value).__name__}"
        )
    return value


def _tool_fields(raw: Mapping[str, Any], kind: HookEvent) -> Dict[str, Any]:
    return {
        "tool_name": _require(raw, "tool_name", (str,), kind),
        "tool_input": dict(_require(raw, "tool_input", (dict,), kind)),
    }


def _session_start(raw, kind):
    return {"source": _require(raw, "source", (str,), kind)}


def _pre_tool_use(raw, kind):
    return _tool_fields(raw, kind)


def _post_tool_use(raw, kind):
    fields = _tool_fields(raw, kind)
    if "tool_response" not in raw:
        raise DecodeError(f"{kind.value} payload is missing required field 'tool_response'")
    fields["tool_response"] = raw["tool_response"]
    return fields


def _notification(raw, kind):
    return {"message": _require(raw, "message", (str,), kind)}


def _stop(raw, kind):
    return {"stop_hook_active": _require(raw, "stop_hook_active", (bool,), kind)}


def _user_prompt_submit(raw, kind):
    return {"prompt": _require(raw, "prompt", (str,), kind)}


def _pre_compact(raw, kind):
    value = _require(raw, "trigger", (str,), kind)
    try:
        return {"trigger": CompactTrigger(value)}
    except ValueError:
        raise DecodeError(f"{kind.value} trigger must be 'auto' or 'manual', got {value!r}") from None


FIELD_DECODERS: Dict[HookEvent, Callable[[Mapping[str, Any], HookEvent], Dict[str, Any]]] = {
    HookEvent.SessionStart: _session_start,
    HookEvent.PreToolUse: _pre_tool_use,
    HookEvent.PostToolUse: _post_tool_use,
    HookEvent.Notification: _notification,
    HookEvent.Stop: _stop,
    HookEvent.SubagentStop: _stop,
    HookEvent.UserPromptSubmit: _user_prompt_submit,
    HookEvent.PreCompact: _pre_compact,
}

# Import-time exhaustiveness check: every kind must have a decoder and a payload type
_missing = set(HookEvent) - set(FIELD_DECODERS) | set(HookEvent) - set(PAYLOAD_TYPES)
if _missing:
    raise RuntimeError(f"No decoder for {sorted(k.value for k in _missing)}")


def resolve_kind(raw: Mapping[str, Any], kind_hint: Optional[str] = None) -> HookEvent:
    """
    Determine the event kind of a raw payload.

    Args:
        raw: The payload as received
        kind_hint: Kind named by the caller (e.g. on the command line)

    Raises:
        DecodeError: If no kind is present, it is unknown, or it contradicts the hint
    """
    declared = None
    for name in KIND_FIELDS:
        if raw.get(name):
            declared = raw[name]
            break

    if declared is not None and kind_hint is not None and declared != kind_hint:
        raise DecodeError(f"Payload kind {declared!r} does not match expected kind {kind_hint!r}")

    value = declared if declared is not None else kind_hint
    if value is None:
        raise DecodeError("Payload has no hook_type / hook_event_name")
    try:
        return HookEvent(value)
    except ValueError:
        raise DecodeError(f"Unrecognized hook kind {value!r}") from None


def decode_event(raw: Any, kind_hint: Optional[str] = None) -> EventPayload:
    """
    Decode a raw host payload into its typed form.

    Args:
        raw: Parsed JSON object delivered by the host
        kind_hint: Optional kind named outside the payload

    Returns:
        The kind-specific EventPayload

    Raises:
        DecodeError: If the payload is not an object, has no recognized kind,
            or lacks a field its kind requires
    """
    if not isinstance(raw, dict):
        raise DecodeError(f"Payload must be a JSON object, got {type(raw).__name__}")

    kind = resolve_kind(raw, kind_hint)
    session_id = _require(raw, "session_id", (str,), kind)
    fields = FIELD_DECODERS[kind](raw, kind)
    return PAYLOAD_TYPES[kind](session_id=session_id, raw=dict(raw), **fields)
