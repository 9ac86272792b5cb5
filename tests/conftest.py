"""Shared fixtures: every test writes into its own temporary log tree."""

import os
from datetime import datetime

import pytest

from agent_hooks.config import HookConfig

FIXED_NOW = datetime(2026, 3, 14, 9, 26, 53)


@pytest.fixture
def clock():
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def config(tmp_path):
    """Config rooted in tmp_path, with the mirror copy in a separate tree."""
    return HookConfig(
        log_dir=tmp_path / "logs",
        mirror_dir=tmp_path / "mirror",
    )


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Run from tmp_path with a private copy of the environment."""
    monkeypatch.setattr(os, "environ", dict(os.environ))
    for name in (
        "AGENT_HOOKS_CONFIG",
        "AGENT_HOOKS_LOG_DIR",
        "AGENT_HOOKS_MIRROR_DIR",
        "AGENT_HOOKS_LOG_LEVEL",
        "AGENT_HOOKS_STOP_SOUND",
        "AGENT_HOOKS_SUBAGENT_SOUND",
        "AGENT_HOOKS_REDACT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def payload(kind, **fields):
    """Build a raw host payload for a kind."""
    data = {"session_id": "sess-123", "hook_event_name": kind}
    data.update(fields)
    return data
