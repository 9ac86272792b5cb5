"""
Structured daily log: one JSON object per line, one file per local day.

Layout: <structured_dir>/<YYYY-MM-DD>.jsonl with fields timestamp,
category, action, message, files. Messages are stored in full.
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from ..errors import PersistenceError
from ..logger import logger
from .files import append_text


class StructuredLog:
    """Append-only JSONL sink for prompt, tool and manual entries."""

    def __init__(self, structured_dir: Path, clock: Callable[[], datetime] = datetime.now):
        self.structured_dir = Path(structured_dir)
        self.clock = clock

    def path_for(self, day: date) -> Path:
        return self.structured_dir / f"{day.isoformat()}.jsonl"

    def append(
        self,
        category: str,
        action: str,
        message: str,
        files: Sequence[str] = (),
    ) -> Dict[str, object]:
        """
        Append one entry to today's file.

        Returns:
            The entry written

        Raises:
            PersistenceError: If the file cannot be written
        """
        now = self.clock()
        entry = {
            "timestamp": now.isoformat(),
            "category": category,
            "action": action,
            "message": message,
            "files": list(files),
        }
        path = self.path_for(now.date())
        try:
            append_text(path, json.dumps(entry, ensure_ascii=False) + "\n")
        # ValueError covers text that cannot be encoded (lone surrogates)
        except (OSError, ValueError) as e:
            raise PersistenceError("structured log", path, e) from e
        return entry

    def read_entries(self, day: Optional[date] = None) -> Iterator[Dict[str, object]]:
        """
        Yield the entries recorded on a day, skipping lines that do not parse.

        Args:
            day: Local date to read (default: today)
        """
        path = self.path_for(day or self.clock().date())
        if not path.exists():
            return

        with open(path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError as e:
                    logger.warning(f"[activity] Skipping malformed line {path}:{lineno}: {e}")
                    continue
                if isinstance(entry, dict):
                    yield entry
                else:
                    logger.warning(f"[activity] Skipping non-object line {path}:{lineno}")


def parse_files(files: Optional[str]) -> List[str]:
    """Split a comma-separated file list, dropping blanks."""
    if not files:
        return []
    return [f.strip() for f in files.split(",") if f.strip()]
