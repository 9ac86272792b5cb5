"""
Tests for the log tools: setup, manual entries, daily and weekly summaries.
"""

from datetime import date, datetime

from agent_hooks.activity.jsonl_log import StructuredLog
from agent_hooks.activity.summary import (
    GITIGNORE,
    append_entry,
    append_task_entry,
    has_activity_today,
    render_daily_summary,
    setup_log_dirs,
    today_activity,
    weekly_summary,
    write_daily_summary,
)


class TestSetup:
    def test_creates_directories_and_gitignore(self, config):
        created = setup_log_dirs(config)

        for directory in [config.log_dir, config.structured_dir, config.audit_dir, *config.narrative_dirs]:
            assert directory.is_dir()
        assert (config.log_dir / ".gitignore").read_text() == GITIGNORE
        assert config.log_dir / ".gitignore" in created

    def test_existing_gitignore_is_kept(self, config):
        config.log_dir.mkdir(parents=True)
        (config.log_dir / ".gitignore").write_text("custom\n")

        setup_log_dirs(config)
        assert setup_log_dirs(config) == []
        assert (config.log_dir / ".gitignore").read_text() == "custom\n"


class TestManualEntries:
    def test_append_entry(self, config, clock):
        entry = append_entry(config, "test", "action", "test message\n", ["test.txt"], clock=clock)

        assert entry["category"] == "test"
        assert entry["message"] == "test message"
        [stored] = StructuredLog(config.structured_dir, clock=clock).read_entries()
        assert stored == entry

    def test_task_entry(self, config, clock):
        written = append_task_entry(
            config, "Test Task", "COMPLETED", deliverables=["test file"], clock=clock
        )

        assert len(written) == 2
        content = written[0].read_text()
        assert "TASK_TYPE: Test Task" in content
        assert "STATUS: COMPLETED" in content
        assert "DELIVERABLES:\n- test file" in content
        assert "ISSUES: None" in content
        assert written[0].read_text() == written[1].read_text()

        [entry] = StructuredLog(config.structured_dir, clock=clock).read_entries()
        assert entry["category"] == "task"
        assert entry["action"] == "completed"

    def test_task_entry_with_issues(self, config, clock):
        [path, _] = append_task_entry(config, "Deploy", "PENDING", issues=["flaky CI"], clock=clock)
        content = path.read_text()
        assert "DELIVERABLES:\n- None" in content
        assert "ISSUES:\n- flaky CI" in content


class TestDailySummary:
    def test_summary_groups_by_category(self, config, clock):
        append_entry(config, "dev", "implement", "task 1", ["file1.js"], clock=clock)
        append_entry(config, "ops", "deploy", "task 2", ["docker-compose.yml"], clock=clock)
        append_entry(config, "dev", "review", "task 3", clock=clock)

        path = write_daily_summary(config, clock=clock)

        assert path == config.structured_dir / "2026-03-14.md"
        content = path.read_text()
        assert "# AI Activity Summary - 2026-03-14" in content
        assert "## Actions Taken" in content
        assert "### dev (2)" in content
        assert "### ops (1)" in content
        assert "- 09:26:53 implement: task 1 (file1.js)" in content

    def test_malformed_lines_are_skipped(self, config, clock):
        append_entry(config, "dev", "implement", "ok", clock=clock)
        path = config.structured_dir / "2026-03-14.jsonl"
        with open(path, "a") as f:
            f.write("{not json\n[1, 2]\n")

        entries = list(StructuredLog(config.structured_dir, clock=clock).read_entries())
        assert len(entries) == 1

    def test_empty_day(self):
        content = render_daily_summary([], date(2026, 1, 1))
        assert "Total entries: 0" in content
        assert "_No activity recorded._" in content


class TestDailyCheck:
    def test_no_activity(self, config, clock):
        assert has_activity_today(config, clock=clock) is False
        assert today_activity(config, clock=clock) is None

    def test_activity_after_task(self, config, clock):
        append_task_entry(config, "Test", "COMPLETED", ["test"], clock=clock)
        assert has_activity_today(config, clock=clock) is True
        assert "TASK_TYPE: Test" in today_activity(config, clock=clock)


class TestWeeklySummary:
    def test_counts_last_seven_days(self, config):
        for day in (8, 10, 14):
            append_entry(config, "dev", "work", f"day {day}",
                         clock=lambda day=day: datetime(2026, 3, day, 12, 0, 0))
        append_entry(config, "dev", "work", "too old", clock=lambda: datetime(2026, 3, 7, 12, 0, 0))

        report = weekly_summary(config, today=date(2026, 3, 14))

        assert report.startswith("Weekly AI Activity Summary (2026-03-08 to 2026-03-14)")
        assert "2026-03-08: 1 entries" in report
        assert "2026-03-09: 0 entries" in report
        assert "Total: 3 entries" in report
        assert "  dev: 3" in report
