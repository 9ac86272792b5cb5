"""
Append-only file helpers shared by every log sink.

Each entry is written with a single O_APPEND write so concurrent hook
processes never interleave partial lines in a shared file. Files are
created if absent and never truncated.
"""

import os
from pathlib import Path


def append_text(path: Path, text: str) -> None:
    """
    Append text to a file in one write call, creating parents as needed.

    Raises:
        OSError: If the directory or file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = text.encode("utf-8")
    fd = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
    try:
        written = os.write(fd, data)
        # Regular files only short-write on ENOSPC-like conditions
        while written < len(data):
            written += os.write(fd, data[written:])
    finally:
        os.close(fd)


def create_if_absent(path: Path, text: str) -> bool:
    """
    Create a file with initial content unless it already exists.

    Returns:
        True if this call created the file
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(path, "x", encoding="utf-8") as f:
            f.write(text)
    except FileExistsError:
        return False
    return True
