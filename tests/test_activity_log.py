"""
Tests for the daily activity log: structured lines, narrative documents,
truncation, redaction and per-copy fault isolation.
"""

import json
from unittest.mock import patch

import pytest

from conftest import payload

from agent_hooks.activity import files
from agent_hooks.activity.activity_log import (
    ActivityLog,
    classify_response,
    describe_tool_call,
    extract_paths,
    preview,
)
from agent_hooks.activity.jsonl_log import parse_files
from agent_hooks.activity.narrative import NarrativeLog
from agent_hooks.activity.redact import redact_text
from agent_hooks.config import HookConfig
from agent_hooks.hooks.decoder import decode_event

LONG_PROMPT = "Please rewrite the configuration loader so it supports layered YAML files and env vars"


def structured_entries(config, day="2026-03-14"):
    path = config.structured_dir / f"{day}.jsonl"
    return [json.loads(line) for line in path.read_text().splitlines()]


def narrative_copies(config, day="2026-03-14"):
    return [(d / f"{day}.md") for d in config.narrative_dirs]


class TestHelpers:
    """Tests for the entry derivation helpers."""

    def test_preview_short_text_unchanged(self):
        assert preview("short", 80) == "short"

    def test_preview_truncates_with_marker(self):
        assert preview("x" * 100, 80) == "x" * 80 + "..."

    def test_preview_exact_limit_not_marked(self):
        assert preview("x" * 80, 80) == "x" * 80

    def test_preview_keeps_one_line(self):
        assert preview("a\nb", 80) == "a b"

    def test_extract_paths(self):
        tool_input = {
            "file_path": "a.py",
            "edits": [{"file_path": "b.py"}, {"file_path": "a.py"}, {"old_string": "x"}],
        }
        assert extract_paths(tool_input) == ["a.py", "b.py"]

    @pytest.mark.parametrize("response,expected", [
        ({"stdout": "ok", "stderr": ""}, "success"),
        ({"stdout": "", "stderr": "boom"}, "failure"),
        ({"filePath": "a.py"}, "completed"),
        ("plain text", "completed"),
    ])
    def test_classify_response(self, response, expected):
        assert classify_response(response) == expected

    def test_describe_tool_call(self):
        assert describe_tool_call("Bash", {"command": "make test"}) == "make test"
        assert describe_tool_call("Edit", {"file_path": "a.py"}) == "Edit a.py"
        assert describe_tool_call("Glob", {"pattern": "*.py"}) == '{"pattern": "*.py"}'

    def test_parse_files(self):
        assert parse_files("file1.js, file2.css,,file3.html ") == ["file1.js", "file2.css", "file3.html"]
        assert parse_files(None) == []

    def test_redact_text(self):
        redacted = redact_text("export API_KEY=abc123 && curl -H 'Authorization: Bearer xyz.789'")
        assert "abc123" not in redacted
        assert "xyz.789" not in redacted
        assert "API_KEY=[REDACTED]" in redacted


class TestActivityLog:
    """Tests for ActivityLog.record."""

    def test_prompt_writes_both_sinks(self, config, clock):
        log = ActivityLog(config, clock=clock)
        log.record(decode_event(payload("UserPromptSubmit", prompt="Add a CLI flag")))

        [entry] = structured_entries(config)
        assert entry == {
            "timestamp": "2026-03-14T09:26:53",
            "category": "prompt",
            "action": "submit",
            "message": "Add a CLI flag",
            "files": [],
        }
        for path in narrative_copies(config):
            content = path.read_text()
            assert content.startswith("# AI Activity Log - 2026-03-14\n")
            assert "## 09:26:53 - Prompt" in content
            assert "- Prompt: Add a CLI flag" in content

    def test_narrative_truncates_but_structured_does_not(self, config, clock):
        assert len(LONG_PROMPT) > 80
        log = ActivityLog(config, clock=clock)
        log.record(decode_event(payload("UserPromptSubmit", prompt=LONG_PROMPT)))

        content = narrative_copies(config)[0].read_text()
        assert f"- Prompt: {LONG_PROMPT[:80]}...\n" in content
        assert LONG_PROMPT not in content
        assert structured_entries(config)[0]["message"] == LONG_PROMPT

    def test_tool_use_entry(self, config, clock):
        log = ActivityLog(config, clock=clock)
        log.record(decode_event(payload(
            "PostToolUse",
            tool_name="Bash",
            tool_input={"command": "pytest -q"},
            tool_response={"stdout": "", "stderr": "1 failed"},
        )))

        [entry] = structured_entries(config)
        assert entry["category"] == "tool"
        assert entry["action"] == "Bash"
        assert entry["message"] == "pytest -q"

        content = narrative_copies(config)[0].read_text()
        assert "## 09:26:53 - Tool: Bash" in content
        assert "- Status: failure" in content
        assert "- Action: pytest -q" in content

    def test_tool_use_lists_files(self, config, clock):
        log = ActivityLog(config, clock=clock)
        log.record(decode_event(payload(
            "PostToolUse",
            tool_name="Write",
            tool_input={"file_path": "src/app.py", "content": "print()"},
            tool_response={"filePath": "src/app.py"},
        )))

        assert structured_entries(config)[0]["files"] == ["src/app.py"]
        assert "- Files: src/app.py" in narrative_copies(config)[0].read_text()

    def test_copies_are_identical(self, config, clock):
        log = ActivityLog(config, clock=clock)
        log.record(decode_event(payload("UserPromptSubmit", prompt="one")))
        log.record(decode_event(payload("UserPromptSubmit", prompt="two")))

        primary, mirror = narrative_copies(config)
        assert primary.read_text() == mirror.read_text()
        assert primary.read_text().count("# AI Activity Log") == 1

    @pytest.mark.parametrize("raw", [
        payload("SessionStart", source="cli"),
        payload("Notification", message="hi"),
        payload("Stop", stop_hook_active=False),
        payload("PreCompact", trigger="auto"),
        payload("PreToolUse", tool_name="Bash", tool_input={"command": "ls"}),
    ])
    def test_other_kinds_write_nothing(self, config, clock, raw):
        ActivityLog(config, clock=clock).record(decode_event(raw))
        assert not config.structured_dir.exists()
        assert not any(p.exists() for p in narrative_copies(config))

    def test_redaction_applies_to_derived_logs(self, tmp_path, clock):
        config = HookConfig(log_dir=tmp_path / "logs", mirror_dir=tmp_path / "mirror", redact=True)
        log = ActivityLog(config, clock=clock)
        log.record(decode_event(payload("UserPromptSubmit", prompt="use password=hunter2")))

        assert "hunter2" not in structured_entries(config)[0]["message"]
        assert "hunter2" not in narrative_copies(config)[0].read_text()


class TestFaultIsolation:
    """A failing location must not stop the other, nor raise."""

    def test_mirror_failure_does_not_stop_primary(self, config, clock):
        # A file where the mirror directory should be makes that copy unwritable
        config.mirror_dir.mkdir(parents=True)
        (config.mirror_dir / "daily").write_text("blocker")

        log = ActivityLog(config, clock=clock)
        log.record(decode_event(payload("UserPromptSubmit", prompt="hello")))

        primary = narrative_copies(config)[0]
        assert "- Prompt: hello" in primary.read_text()

    def test_primary_failure_does_not_stop_mirror(self, config, clock):
        config.log_dir.mkdir(parents=True)
        (config.log_dir / "daily").write_text("blocker")

        log = ActivityLog(config, clock=clock)
        log.record(decode_event(payload("UserPromptSubmit", prompt="hello")))

        mirror = narrative_copies(config)[1]
        assert "- Prompt: hello" in mirror.read_text()
        assert structured_entries(config)[0]["message"] == "hello"

    def test_first_write_failure_still_attempts_second(self, tmp_path, clock):
        narrative = NarrativeLog([tmp_path / "a", tmp_path / "b"], clock=clock)
        real_append = files.append_text
        calls = []

        def flaky_append(path, text):
            calls.append(path)
            if len(calls) == 1:
                raise OSError("simulated failure")
            real_append(path, text)

        with patch("agent_hooks.activity.narrative.append_text", side_effect=flaky_append):
            written = narrative.append_section("Prompt", ["- Prompt: hi"])

        assert written == [tmp_path / "b" / "2026-03-14.md"]
        assert len(calls) == 2

    def test_structured_failure_is_contained(self, config, clock):
        config.structured_dir.parent.mkdir(parents=True, exist_ok=True)
        config.structured_dir.write_text("blocker")

        log = ActivityLog(config, clock=clock)
        log.record(decode_event(payload("UserPromptSubmit", prompt="hello")))

        assert "- Prompt: hello" in narrative_copies(config)[0].read_text()

    def test_unencodable_prompt_is_contained(self, config, clock):
        log = ActivityLog(config, clock=clock)
        # A lone surrogate is valid JSON but cannot be written as UTF-8
        log.record(decode_event(payload("UserPromptSubmit", prompt="fix \ud800 bug")))

        assert not (config.structured_dir / "2026-03-14.jsonl").exists()
        for path in narrative_copies(config):
            assert "fix" not in path.read_text()

    def test_structured_encoding_failure_still_writes_narrative(self, config, clock):
        error = UnicodeEncodeError("utf-8", "\ud800", 0, 1, "surrogates not allowed")
        log = ActivityLog(config, clock=clock)

        with patch("agent_hooks.activity.jsonl_log.append_text", side_effect=error):
            log.record(decode_event(payload("UserPromptSubmit", prompt="hello")))

        for path in narrative_copies(config):
            assert "- Prompt: hello" in path.read_text()

    def test_encoding_failure_on_first_copy_still_writes_second(self, tmp_path, clock):
        narrative = NarrativeLog([tmp_path / "a", tmp_path / "b"], clock=clock)
        real_append = files.append_text
        calls = []

        def flaky_append(path, text):
            calls.append(path)
            if len(calls) == 1:
                raise UnicodeEncodeError("utf-8", text, 0, 1, "surrogates not allowed")
            real_append(path, text)

        with patch("agent_hooks.activity.narrative.append_text", side_effect=flaky_append):
            written = narrative.append_section("Prompt", ["- Prompt: hi"])

        assert written == [tmp_path / "b" / "2026-03-14.md"]
