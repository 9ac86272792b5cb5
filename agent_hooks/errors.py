"""
Exception types for the hook dispatcher.

Only DecodeError and RegistryError are allowed to end an invocation; the
rest are contained where they are raised and degrade to a safe default.
"""


class HookError(Exception):
    """Base class for all agent_hooks errors."""


class DecodeError(HookError):
    """The incoming payload has no recognized kind or lacks a required field."""


class RegistryError(HookError):
    """A hook kind has no handler bound, or more than one."""


class InvalidDecisionError(HookError):
    """A handler returned a decision that does not validate for its kind."""


class PersistenceError(HookError):
    """A write to one of the log sinks failed."""

    def __init__(self, sink: str, path, cause: Exception):
        super().__init__(f"{sink} write to {path} failed: {cause}")
        self.sink = sink
        self.path = path
        self.cause = cause


class ConfigError(HookError):
    """The configuration file could not be used."""
