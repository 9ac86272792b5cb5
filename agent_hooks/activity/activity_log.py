"""
Daily activity log: derives summary entries from hook events.

UserPromptSubmit and PostToolUse events produce one structured line and
one narrative section each. The narrative carries a bounded preview of
free text; the structured line keeps the full message.
"""

import json
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from ..config import HookConfig
from ..errors import PersistenceError
from ..hooks.types import EventPayload, HookEvent, PostToolUsePayload, UserPromptSubmitPayload
from ..logger import logger
from .jsonl_log import StructuredLog
from .narrative import NarrativeLog
from .redact import redact_text

ELLIPSIS = "..."

# tool_input keys that name a file the tool touched
PATH_KEYS = ("file_path", "path", "notebook_path")


def preview(text: str, limit: int) -> str:
    """Truncate text to `limit` characters, marking the cut, on one line."""
    if len(text) > limit:
        text = text[:limit] + ELLIPSIS
    return text.replace("\r\n", " ").replace("\n", " ")


def extract_paths(tool_input: Dict[str, Any]) -> List[str]:
    """Extract the file paths a tool call refers to, in order, without repeats."""
    paths = []
    for key in PATH_KEYS:
        value = tool_input.get(key)
        if isinstance(value, str) and value:
            paths.append(value)
    # MultiEdit passes a list of edits, each with their own file_path
    for edit in tool_input.get("edits") or []:
        if isinstance(edit, dict) and isinstance(edit.get("file_path"), str):
            paths.append(edit["file_path"])
    return list(dict.fromkeys(paths))


def classify_response(tool_response: Any) -> str:
    """
    Coarse outcome of a tool call from its response.

    stderr output means failure, stdout without stderr means success;
    responses with neither are reported as completed.
    """
    if not isinstance(tool_response, dict):
        return "completed"
    if tool_response.get("stderr"):
        return "failure"
    if "stdout" in tool_response:
        return "success"
    return "completed"


def describe_tool_call(tool_name: str, tool_input: Dict[str, Any]) -> str:
    """One-line description of what a tool call did."""
    if isinstance(tool_input.get("command"), str):
        return tool_input["command"]
    if isinstance(tool_input.get("description"), str):
        return tool_input["description"]
    paths = extract_paths(tool_input)
    if paths:
        return f"{tool_name} {', '.join(paths)}"
    return json.dumps(tool_input, sort_keys=True, default=str)


class ActivityLog:
    """
    Writes the derived daily entries for relevant events.

    Each sink is attempted independently; failures are logged and never
    raised to the caller.
    """

    def __init__(self, config: HookConfig, clock: Callable[[], datetime] = datetime.now):
        self.config = config
        self.structured = StructuredLog(config.structured_dir, clock=clock)
        self.narrative = NarrativeLog(config.narrative_dirs, clock=clock)

    def _clean(self, text: str) -> str:
        return redact_text(text) if self.config.redact else text

    def record(self, event: EventPayload) -> None:
        """Record the derived entries for an event, if its kind has any."""
        if event.kind is HookEvent.UserPromptSubmit:
            self.record_prompt(event)
        elif event.kind is HookEvent.PostToolUse:
            self.record_tool_use(event)

    def record_prompt(self, event: UserPromptSubmitPayload) -> None:
        prompt = self._clean(event.prompt)
        self._structured("prompt", "submit", prompt, [])
        self.narrative.append_section("Prompt", [
            f"- Session: {event.session_id}",
            f"- Prompt: {preview(prompt, self.config.preview_length)}",
        ])

    def record_tool_use(self, event: PostToolUsePayload) -> None:
        files = extract_paths(event.tool_input)
        description = self._clean(describe_tool_call(event.tool_name, event.tool_input))
        outcome = classify_response(event.tool_response)

        self._structured("tool", event.tool_name, description, files)

        lines = [
            f"- Session: {event.session_id}",
            f"- Status: {outcome}",
            f"- Action: {preview(description, self.config.preview_length)}",
        ]
        if files:
            lines.append(f"- Files: {', '.join(files)}")
        self.narrative.append_section(f"Tool: {event.tool_name}", lines)

    def _structured(self, category: str, action: str, message: str, files: List[str]) -> Optional[dict]:
        try:
            return self.structured.append(category, action, message, files)
        except PersistenceError as e:
            logger.error(f"[activity] {e}")
            return None
