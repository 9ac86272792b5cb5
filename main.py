#!/usr/bin/env python3
"""
Entry point for the agent lifecycle hook dispatcher.

The host runs this once per event with the payload on stdin and reads the
decision from stdout.

Usage:
    python main.py                        # Dispatch the event on stdin
    python main.py hook PreToolUse        # Same, naming the expected kind

Log tools:
    python main.py log setup              # Create log directories
    python main.py log check              # Has anything been logged today?
    echo "msg" | python main.py log add CATEGORY ACTION --files="a.py, b.py"
    python main.py log task --task="Refactor" --status=COMPLETED --deliverables="a.py"
    python main.py log today              # Print today's narrative log
    python main.py log summary            # Write today's summary document
    python main.py log week               # Print the weekly summary
"""

import argparse
import json
import sys
from typing import List, Optional, TextIO

from agent_hooks.activity.jsonl_log import parse_files
from agent_hooks.activity.summary import (
    append_entry,
    append_task_entry,
    has_activity_today,
    setup_log_dirs,
    today_activity,
    weekly_summary,
    write_daily_summary,
)
from agent_hooks.config import HookConfig, load_config
from agent_hooks.errors import ConfigError, DecodeError, PersistenceError, RegistryError
from agent_hooks.hooks.dispatcher import build_dispatcher
from agent_hooks.hooks.types import HookEvent
from agent_hooks.logger import configure_logging, logger

EXIT_OK = 0
EXIT_FAULT = 1


def run_hook(config: HookConfig, kind: Optional[str], stdin: TextIO, stdout: TextIO) -> int:
    """
    Dispatch one event from stdin and write the decision to stdout.

    Returns:
        0 when a decision was produced (including deny/block),
        1 on an unreadable payload or a configuration fault
    """
    try:
        raw = json.loads(stdin.read())
    except json.JSONDecodeError as e:
        logger.error(f"[hooks] Payload is not valid JSON: {e}")
        return EXIT_FAULT

    try:
        dispatcher = build_dispatcher(config)
    except RegistryError as e:
        logger.error(f"[hooks] Handler registry misconfigured: {e}")
        return EXIT_FAULT

    try:
        response = dispatcher.dispatch(raw, kind_hint=kind)
    except DecodeError as e:
        logger.error(f"[hooks] Rejected payload: {e}")
        return EXIT_FAULT
    except Exception:
        # The host has no error channel; fall back to "continue"
        logger.exception("[hooks] Unexpected dispatch failure, continuing")
        response = {}

    stdout.write(json.dumps(response))
    stdout.write("\n")
    stdout.flush()
    return EXIT_OK


def handle_log_command(config: HookConfig, args, stdin: TextIO, stdout: TextIO) -> int:
    """Handle the `log` tool subcommands."""
    if args.action == "setup":
        created = setup_log_dirs(config)
        print(f"Setting up logging directories in {config.log_dir}", file=stdout)
        for path in created:
            print(f"  created {path}", file=stdout)
        return EXIT_OK

    if args.action == "check":
        if has_activity_today(config):
            print("AI logging is up to date for today.", file=stdout)
        else:
            print("No AI logging detected for today.", file=stdout)
            print("Record work with: python main.py log task --task=... --status=COMPLETED", file=stdout)
        return EXIT_OK

    if args.action == "add":
        if not args.category or not args.log_action:
            print("Error: category and action are required for 'add'", file=sys.stderr)
            return EXIT_FAULT
        message = stdin.read()
        try:
            entry = append_entry(config, args.category, args.log_action, message, parse_files(args.files))
        except PersistenceError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_FAULT
        print(json.dumps(entry), file=stdout)
        return EXIT_OK

    if args.action == "task":
        if not args.task:
            print("Error: --task is required for 'task'", file=sys.stderr)
            return EXIT_FAULT
        written = append_task_entry(
            config,
            task=args.task,
            status=args.status,
            deliverables=parse_files(args.deliverables),
            issues=parse_files(args.issues),
        )
        if not written:
            print("Error: task entry could not be written", file=sys.stderr)
            return EXIT_FAULT
        for path in written:
            print(f"Logged task to {path}", file=stdout)
        return EXIT_OK

    if args.action == "today":
        content = today_activity(config)
        print("Today's AI Activity", file=stdout)
        print("-" * 50, file=stdout)
        print(content if content else "No activity logged today.", file=stdout)
        return EXIT_OK

    if args.action == "summary":
        path = write_daily_summary(config)
        print(f"Daily summary written to {path}", file=stdout)
        return EXIT_OK

    if args.action == "week":
        print(weekly_summary(config), file=stdout)
        return EXIT_OK

    return EXIT_FAULT


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Agent lifecycle hook dispatcher and activity log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py < payload.json           # Dispatch one host event
  python main.py hook Stop < payload.json # Dispatch, expecting a Stop event
  python main.py log week                 # Weekly activity summary
        """
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML config file (default: $AGENT_HOOKS_CONFIG or ./agent-hooks.yaml)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    hook_parser = subparsers.add_parser("hook", help="Dispatch the event on stdin")
    hook_parser.add_argument(
        "kind",
        nargs="?",
        choices=[e.value for e in HookEvent],
        help="Expected event kind, used when the payload does not name one"
    )

    log_parser = subparsers.add_parser("log", help="Activity log tools")
    log_parser.add_argument(
        "action",
        choices=["setup", "check", "add", "task", "today", "summary", "week"],
        help="Log action"
    )
    log_parser.add_argument("category", nargs="?", help="Entry category (for add)")
    log_parser.add_argument("log_action", nargs="?", metavar="entry_action", help="Entry action (for add)")
    log_parser.add_argument("--files", type=str, default=None, help="Comma-separated file list (for add)")
    log_parser.add_argument("--task", type=str, default=None, help="Task type (for task)")
    log_parser.add_argument("--status", type=str, default="COMPLETED", help="Task status (for task)")
    log_parser.add_argument("--deliverables", type=str, default=None, help="Comma-separated deliverables")
    log_parser.add_argument("--issues", type=str, default=None, help="Comma-separated issues")

    return parser


def main(argv: Optional[List[str]] = None, stdin: TextIO = None, stdout: TextIO = None) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        configure_logging(None)
        logger.error(f"[config] {e}")
        return EXIT_FAULT

    configure_logging(config.diagnostics_file, config.log_level)

    if args.command == "log":
        return handle_log_command(config, args, stdin, stdout)

    return run_hook(config, getattr(args, "kind", None), stdin, stdout)


if __name__ == "__main__":
    sys.exit(main())
