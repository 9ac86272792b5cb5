"""
Reporting and manual-entry operations over the daily logs.

These back the `main.py log ...` commands: daily and weekly summaries,
manual task entries, and log directory setup. They read the same files
the dispatcher writes.
"""

from collections import OrderedDict
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from ..config import HookConfig
from ..errors import PersistenceError
from ..logger import logger
from .files import create_if_absent
from .jsonl_log import StructuredLog
from .narrative import NarrativeLog

GITIGNORE = "# Generated by agent-hooks; logs stay local\n*\n!.gitignore\n"


def setup_log_dirs(config: HookConfig) -> List[Path]:
    """
    Create the log directories and a .gitignore in the log root.

    Existing directories and files are left untouched.

    Returns:
        The directories and files this call created
    """
    created = []
    for directory in [config.log_dir, config.structured_dir, config.audit_dir, *config.narrative_dirs]:
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            created.append(directory)

    gitignore = config.log_dir / ".gitignore"
    if create_if_absent(gitignore, GITIGNORE):
        created.append(gitignore)

    for path in created:
        logger.info(f"[activity] Created {path}")
    return created


def append_entry(
    config: HookConfig,
    category: str,
    action: str,
    message: str,
    files: Sequence[str] = (),
    clock: Callable[[], datetime] = datetime.now,
) -> Dict[str, object]:
    """
    Add a manual entry to the structured log.

    Raises:
        PersistenceError: If the entry cannot be written
    """
    return StructuredLog(config.structured_dir, clock=clock).append(
        category, action, message.strip(), files
    )


def append_task_entry(
    config: HookConfig,
    task: str,
    status: str,
    deliverables: Sequence[str] = (),
    issues: Sequence[str] = (),
    clock: Callable[[], datetime] = datetime.now,
) -> List[Path]:
    """
    Record a completed (or pending) task in the narrative documents.

    Also adds a "task" line to the structured log so summaries count it.

    Returns:
        The narrative documents written
    """
    lines = [f"TASK_TYPE: {task}", f"STATUS: {status}", "DELIVERABLES:"]
    lines += [f"- {d}" for d in deliverables] or ["- None"]
    if issues:
        lines.append("ISSUES:")
        lines += [f"- {i}" for i in issues]
    else:
        lines.append("ISSUES: None")

    written = NarrativeLog(config.narrative_dirs, clock=clock).append_section(f"Task: {task}", lines)

    try:
        StructuredLog(config.structured_dir, clock=clock).append(
            "task", status.lower(), task, list(deliverables)
        )
    except PersistenceError as e:
        logger.error(f"[activity] {e}")

    return written


def render_daily_summary(entries: Sequence[Dict[str, object]], day: date) -> str:
    """Render structured entries as a markdown summary grouped by category."""
    by_category: "OrderedDict[str, List[Dict[str, object]]]" = OrderedDict()
    for entry in entries:
        by_category.setdefault(str(entry.get("category", "uncategorized")), []).append(entry)

    lines = [
        f"# AI Activity Summary - {day.isoformat()}",
        "",
        f"Total entries: {len(entries)}",
        "",
        "## Actions Taken",
        "",
    ]
    if not entries:
        lines += ["_No activity recorded._", ""]

    for category, items in by_category.items():
        lines.append(f"### {category} ({len(items)})")
        for entry in items:
            timestamp = str(entry.get("timestamp", ""))
            clock_time = timestamp[11:19] if len(timestamp) >= 19 else timestamp
            line = f"- {clock_time} {entry.get('action', '')}: {entry.get('message', '')}"
            files = entry.get("files") or []
            if files:
                line += f" ({', '.join(str(f) for f in files)})"
            lines.append(line)
        lines.append("")

    return "\n".join(lines)


def write_daily_summary(
    config: HookConfig,
    day: Optional[date] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> Path:
    """
    Generate <structured_dir>/<date>.md from the day's structured log.

    Returns:
        Path of the summary document
    """
    day = day or clock().date()
    log = StructuredLog(config.structured_dir, clock=clock)
    entries = list(log.read_entries(day))

    path = config.structured_dir / f"{day.isoformat()}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_daily_summary(entries, day), encoding="utf-8")
    logger.info(f"[activity] Wrote daily summary {path} ({len(entries)} entries)")
    return path


def today_activity(
    config: HookConfig,
    clock: Callable[[], datetime] = datetime.now,
) -> Optional[str]:
    """Return today's narrative document, or None if nothing was logged."""
    return NarrativeLog(config.narrative_dirs, clock=clock).read_day()


def has_activity_today(
    config: HookConfig,
    clock: Callable[[], datetime] = datetime.now,
) -> bool:
    """Daily check: has anything been logged for today?"""
    today = clock().date()
    structured = StructuredLog(config.structured_dir, clock=clock)
    narrative = NarrativeLog(config.narrative_dirs, clock=clock)
    return structured.path_for(today).exists() or narrative.exists(today)


def weekly_summary(
    config: HookConfig,
    today: Optional[date] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> str:
    """
    Report per-day entry counts for the seven days ending today.

    Returns:
        Plain-text report headed "Weekly AI Activity Summary"
    """
    today = today or clock().date()
    start = today - timedelta(days=6)
    structured = StructuredLog(config.structured_dir, clock=clock)
    narrative = NarrativeLog(config.narrative_dirs, clock=clock)

    lines = [f"Weekly AI Activity Summary ({start.isoformat()} to {today.isoformat()})", ""]
    total = 0
    categories: Dict[str, int] = {}
    for offset in range(7):
        day = start + timedelta(days=offset)
        entries = list(structured.read_entries(day))
        total += len(entries)
        for entry in entries:
            category = str(entry.get("category", "uncategorized"))
            categories[category] = categories.get(category, 0) + 1
        marker = " (narrative)" if narrative.exists(day) else ""
        lines.append(f"{day.isoformat()}: {len(entries)} entries{marker}")

    lines += ["", f"Total: {total} entries"]
    for category, count in sorted(categories.items()):
        lines.append(f"  {category}: {count}")
    return "\n".join(lines)
