"""agent-hooks: lifecycle event dispatcher and activity log for a coding agent host."""

__version__ = "0.1.0"
