"""
Completion cue: runs a configured command (typically a sound player) when
the agent or a sub-agent stops. Best effort; nothing here raises.
"""

import shlex
import subprocess
from typing import List, Optional

from .logger import logger


class CompletionNotifier:
    """Runs one external command per notification."""

    def __init__(self, command: Optional[str] = None, timeout: float = 10.0):
        """
        Args:
            command: Shell-style command line, or None to disable
            timeout: Seconds to wait before abandoning the command
        """
        self.command: Optional[List[str]] = shlex.split(command) if command else None
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.command)

    def notify(self, cue: str) -> bool:
        """
        Run the command for a cue.

        Args:
            cue: Label for diagnostics ("stop", "subagent_stop")

        Returns:
            True if the command ran and exited with status 0
        """
        if not self.command:
            logger.debug(f"[notify] No command configured for {cue}")
            return False

        try:
            result = subprocess.run(
                self.command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"[notify] {cue} command timed out after {self.timeout}s")
            return False
        except OSError as e:
            logger.warning(f"[notify] {cue} command could not start: {e}")
            return False

        if result.returncode != 0:
            logger.warning(f"[notify] {cue} command exited with code {result.returncode}")
            if result.stderr:
                logger.warning(f"[notify] {cue} stderr: {result.stderr.strip()}")
            return False

        logger.debug(f"[notify] {cue} cue played")
        return True
