"""
Decision encoder: maps a HookResult to the response shape the host expects.

Only PreToolUse and UserPromptSubmit carry enforceable fields. Every other
kind encodes to the empty response whatever its handler returned.
"""

from typing import Any, Callable, Dict

from .types import HookEvent, HookResult


def _encode_pre_tool_use(result: HookResult) -> Dict[str, Any]:
    if result.permission_decision is None:
        return {}
    output = {
        "hookEventName": HookEvent.PreToolUse.value,
        "permissionDecision": result.permission_decision.value,
    }
    if result.permission_reason:
        output["permissionDecisionReason"] = result.permission_reason
    return {"hookSpecificOutput": output}


def _encode_user_prompt_submit(result: HookResult) -> Dict[str, Any]:
    response: Dict[str, Any] = {}
    if result.decision == "block":
        response["decision"] = "block"
        response["reason"] = result.reason
        # A blocked prompt is never sent on, so there is nothing to augment
        return response
    if result.context_files:
        response["contextFiles"] = list(result.context_files)
    return response


def _encode_nothing(result: HookResult) -> Dict[str, Any]:
    return {}


ENCODERS: Dict[HookEvent, Callable[[HookResult], Dict[str, Any]]] = {
    HookEvent.SessionStart: _encode_nothing,
    HookEvent.PreToolUse: _encode_pre_tool_use,
    HookEvent.PostToolUse: _encode_nothing,
    HookEvent.Notification: _encode_nothing,
    HookEvent.Stop: _encode_nothing,
    HookEvent.SubagentStop: _encode_nothing,
    HookEvent.UserPromptSubmit: _encode_user_prompt_submit,
    # Logged only; a veto field is reserved for later
    HookEvent.PreCompact: _encode_nothing,
}

if set(ENCODERS) != set(HookEvent):
    raise RuntimeError("ENCODERS must cover every HookEvent")


def encode_decision(kind: HookEvent, result: HookResult) -> Dict[str, Any]:
    """
    Encode a decision for the host.

    Args:
        kind: The event kind the decision answers
        result: The handler's decision

    Returns:
        A JSON-serializable dict; {} means "continue normally"
    """
    return ENCODERS[kind](result)
