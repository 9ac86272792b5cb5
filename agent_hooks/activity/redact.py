"""
Optional masking of secrets in the derived logs.

Off by default: prompts, commands and paths are logged verbatim. When
enabled, key/value secrets and bearer tokens are replaced before text
reaches the structured or narrative sinks. The audit store is never
redacted.
"""

import re

MASK = "[REDACTED]"

_KEY_VALUE = re.compile(
    r"(?i)\b([\w-]*(?:api[_-]?key|token|secret|password|passwd)[\w-]*)(\s*[=:]\s*)(\"[^\"]*\"|'[^']*'|\S+)"
)
_BEARER = re.compile(r"(?i)\b(bearer\s+)[A-Za-z0-9._~+/-]+=*")


def redact_text(text: str) -> str:
    """Mask secret-looking values in a string."""
    text = _KEY_VALUE.sub(lambda m: f"{m.group(1)}{m.group(2)}{MASK}", text)
    return _BEARER.sub(lambda m: f"{m.group(1)}{MASK}", text)
