"""
Narrative daily documents: a human-readable markdown log per local day.

Every document is kept in two locations of equal standing. Each section is
written to both, independently: a failure on one copy is logged and does
not stop the write to the other.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..errors import PersistenceError
from ..logger import logger
from .files import append_text, create_if_absent


class NarrativeLog:
    """Markdown daily documents duplicated across two directories."""

    def __init__(self, directories: Sequence[Path], clock: Callable[[], datetime] = datetime.now):
        """
        Initialize the narrative log.

        Args:
            directories: Directories holding a copy of each daily document
            clock: Source of the local time used for the day boundary
        """
        self.directories = [Path(d) for d in directories]
        self.clock = clock

    def path_for(self, directory: Path, day: date) -> Path:
        return directory / f"{day.isoformat()}.md"

    def _header(self, day: date) -> str:
        return f"# AI Activity Log - {day.isoformat()}\n\n"

    def _section(self, now: datetime, title: str, lines: Sequence[str]) -> str:
        body = "\n".join(lines)
        return f"## {now.strftime('%H:%M:%S')} - {title}\n{body}\n\n"

    def append_section(self, title: str, lines: Sequence[str]) -> List[Path]:
        """
        Append one section to today's document in every location.

        Args:
            title: Section heading after the time stamp
            lines: Body lines, typically "- Key: value" bullets

        Returns:
            The documents successfully written
        """
        now = self.clock()
        header = self._header(now.date())
        section = self._section(now, title, lines)

        written = []
        for directory in self.directories:
            path = self.path_for(directory, now.date())
            try:
                self._write(path, header, section)
            except PersistenceError as e:
                logger.error(f"[activity] {e}")
                continue
            written.append(path)

        if not written:
            logger.error(f"[activity] Narrative entry '{title}' was not written to any location")
        return written

    def _write(self, path: Path, header: str, section: str) -> None:
        try:
            create_if_absent(path, header)
            append_text(path, section)
        except (OSError, ValueError) as e:
            raise PersistenceError("narrative", path, e) from e

    def read_day(self, day: Optional[date] = None) -> Optional[str]:
        """
        Read a day's document from the first location that has it.

        Returns:
            The document text, or None if no copy exists
        """
        day = day or self.clock().date()
        for directory in self.directories:
            path = self.path_for(directory, day)
            try:
                return path.read_text(encoding="utf-8")
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"[activity] Cannot read {path}: {e}")
        return None

    def exists(self, day: Optional[date] = None) -> bool:
        day = day or self.clock().date()
        return any(self.path_for(d, day).exists() for d in self.directories)
