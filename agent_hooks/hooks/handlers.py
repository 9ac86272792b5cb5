"""
Default handlers, one per event kind.

PreToolUse and UserPromptSubmit are the only handlers that veto anything,
and they do it by fixed pattern matching so the same payload always gets
the same answer.
"""

import re
from typing import List, Optional, Tuple

from ..config import HookConfig
from ..logger import logger
from ..notifier import CompletionNotifier
from .manager import HookManager
from .types import (
    HookEvent,
    HookResult,
    NotificationPayload,
    PostToolUsePayload,
    PreCompactPayload,
    PreToolUsePayload,
    SessionStartPayload,
    StopPayload,
    SubagentStopPayload,
    UserPromptSubmitPayload,
)

RECURSIVE_DELETE_LABEL = "recursive delete of an absolute or home path"

# Always denied wherever it appears in a command
RM_RF_ROOT = "rm -rf /"

# rm with its option words, followed by a target starting at / or ~
_RM_CALL = re.compile(r"\brm((?:\s+-{1,2}[a-zA-Z-]+)+)\s+[\"']?[/~]")
_RECURSIVE_FLAG = re.compile(r"(?:^|\s)(?:-[a-zA-Z]*[rR]|--recursive\b)")
_FORCE_FLAG = re.compile(r"(?:^|\s)(?:-[a-zA-Z]*f|--force\b)")

# (pattern, label) pairs matched against Bash commands
DANGEROUS_COMMANDS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r":\(\)\s*\{\s*:\s*\|\s*:\s*&\s*\}\s*;\s*:"), "fork bomb"),
    (re.compile(r"\bdd\s+.*\bof=/dev/(sd|hd|nvme|disk)"), "raw write to a disk device"),
    (re.compile(r"\bmkfs(\.\w+)?\s+/dev/"), "filesystem format"),
    (re.compile(r"\bchmod\s+-R\s+777\s+/(\s|$)"), "world-writable root"),
]

DANGEROUS_PROMPTS = ("delete all",)
BLOCKED_PROMPT_REASON = (
    "Prompt blocked: it asks for a bulk destructive action ('delete all'). "
    "Rephrase with the specific items to remove."
)

TEST_CONTEXT_FILES = [
    "**/*.test.*",
    "**/*.spec.*",
    "**/test_*.py",
    "**/*_test.py",
    "tests/**",
    "test/**",
]


def is_recursive_force_delete(command: str) -> bool:
    """
    Check for `rm` with both recursive and force options aimed at / or ~.

    The options may be combined (-rf, -Rf, -fr) or split (-r -f,
    --recursive --force).
    """
    for match in _RM_CALL.finditer(command):
        flags = match.group(1)
        if _RECURSIVE_FLAG.search(flags) and _FORCE_FLAG.search(flags):
            return True
    return False


def find_dangerous_command(command: str) -> Optional[str]:
    """Return the label of the first dangerous pattern in a command, if any."""
    if RM_RF_ROOT in command or is_recursive_force_delete(command):
        return RECURSIVE_DELETE_LABEL
    for pattern, label in DANGEROUS_COMMANDS:
        if pattern.search(command):
            return label
    return None


def on_session_start(event: SessionStartPayload) -> HookResult:
    logger.info(f"[hooks] Session {event.session_id} started (source={event.source})")
    return HookResult.cont()


def on_pre_tool_use(event: PreToolUsePayload) -> HookResult:
    """Deny Bash commands matching a known destructive pattern."""
    if event.tool_name != "Bash":
        return HookResult.cont()

    command = event.tool_input.get("command")
    if not isinstance(command, str):
        return HookResult.cont()

    label = find_dangerous_command(command)
    if label is None:
        return HookResult.cont()

    logger.warning(f"[hooks] Denied Bash command ({label}) in session {event.session_id}: {command}")
    return HookResult.deny(f"Blocked dangerous command ({label}): {command}")


def on_post_tool_use(event: PostToolUsePayload) -> HookResult:
    logger.debug(f"[hooks] {event.tool_name} finished in session {event.session_id}")
    return HookResult.cont()


def on_notification(event: NotificationPayload) -> HookResult:
    logger.info(f"[hooks] Notification for {event.session_id}: {event.message}")
    return HookResult.cont()


def on_user_prompt_submit(event: UserPromptSubmitPayload) -> HookResult:
    """
    Block bulk-destructive prompts; add test files as context for
    prompts that mention tests.
    """
    lowered = event.prompt.lower()
    for phrase in DANGEROUS_PROMPTS:
        if phrase in lowered:
            logger.warning(f"[hooks] Blocked prompt in session {event.session_id} ('{phrase}')")
            return HookResult.block(BLOCKED_PROMPT_REASON)

    if "test" in lowered:
        return HookResult(context_files=list(TEST_CONTEXT_FILES))
    return HookResult.cont()


def on_pre_compact(event: PreCompactPayload) -> HookResult:
    logger.info(f"[hooks] Compaction ({event.trigger.value}) in session {event.session_id}")
    return HookResult.cont()


class StopHandlers:
    """
    Stop and SubagentStop handlers, sharing the notifiers.

    When stop_hook_active is set the host is already continuing because of
    a stop hook; the cue is skipped so stop hooks cannot re-trigger each
    other.
    """

    def __init__(self, stop_notifier: CompletionNotifier, subagent_notifier: CompletionNotifier):
        self.stop_notifier = stop_notifier
        self.subagent_notifier = subagent_notifier

    def on_stop(self, event: StopPayload) -> HookResult:
        if event.stop_hook_active:
            logger.debug(f"[hooks] Stop hook already active for {event.session_id}, skipping cue")
            return HookResult.cont()
        self.stop_notifier.notify("stop")
        return HookResult.cont()

    def on_subagent_stop(self, event: SubagentStopPayload) -> HookResult:
        if event.stop_hook_active:
            logger.debug(f"[hooks] Stop hook already active for {event.session_id}, skipping cue")
            return HookResult.cont()
        self.subagent_notifier.notify("subagent_stop")
        return HookResult.cont()


def build_default_manager(config: HookConfig) -> HookManager:
    """
    Bind the default handler for every event kind.

    Raises:
        RegistryError: If a kind ends up without a handler
    """
    stop_handlers = StopHandlers(
        CompletionNotifier(config.stop_sound, timeout=config.notify_timeout),
        CompletionNotifier(config.subagent_sound, timeout=config.notify_timeout),
    )

    manager = HookManager()
    manager.register(HookEvent.SessionStart, on_session_start)
    manager.register(HookEvent.PreToolUse, on_pre_tool_use)
    manager.register(HookEvent.PostToolUse, on_post_tool_use)
    manager.register(HookEvent.Notification, on_notification)
    manager.register(HookEvent.Stop, stop_handlers.on_stop)
    manager.register(HookEvent.SubagentStop, stop_handlers.on_subagent_stop)
    manager.register(HookEvent.UserPromptSubmit, on_user_prompt_submit)
    manager.register(HookEvent.PreCompact, on_pre_compact)
    manager.verify()
    return manager
