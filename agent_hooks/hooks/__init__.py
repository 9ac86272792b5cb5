"""
Lifecycle Hook Dispatch

The host agent starts one process per lifecycle event. That process
decodes the payload, runs the single handler bound to its kind, and
writes the handler's decision back to the host.

Hook events:
- SessionStart, PreToolUse, PostToolUse, Notification
- Stop, SubagentStop, UserPromptSubmit, PreCompact

Example usage:
    from agent_hooks.hooks import HookManager, HookEvent, HookResult

    hooks = HookManager()

    @hooks.on(HookEvent.PreToolUse)
    def block_dangerous_commands(event):
        if event.tool_name == 'Bash':
            if 'rm -rf /' in event.tool_input.get('command', ''):
                return HookResult.deny('Dangerous command blocked')
        return None
"""

from .types import HookEvent, EventPayload, HookResult, PermissionDecision
from .manager import HookManager
from .decoder import decode_event
from .encoder import encode_decision

__all__ = [
    'HookEvent',
    'EventPayload',
    'HookResult',
    'PermissionDecision',
    'HookManager',
    'decode_event',
    'encode_decision',
]
