"""Best-effort metadata and preview queries for the hovered entry.

Every function here returns a string and never raises: failures turn into an
empty string or the ``Error reading`` sentinel so the render layer can show
something sensible.
"""

from __future__ import annotations

import getpass
import os
import socket
import stat
import subprocess
from itertools import islice

from vim_fm.runtime import telemetry

ERROR_SENTINEL = "Error reading"


def user_at_host() -> str:
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = os.environ.get("USER", "user")
    return f"{user}@{socket.gethostname()}"


def permissions(path: str) -> str:
    try:
        return stat.filemode(os.lstat(path).st_mode)
    except OSError:
        return ""


def disk_usage(path: str) -> str:
    """Human readable size as reported by ``du -sh``."""

    try:
        completed = subprocess.run(
            ["du", "-sh", path],
            capture_output=True,
            text=True,
            timeout=2,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        telemetry.record_event("system.du_failed", level="debug", data={"path": path, "reason": str(exc)})
        return ""
    for line in completed.stdout.splitlines():
        if line.strip() and not line.startswith("total"):
            return line.split("\t", 1)[0].strip()
    return ""


def file_preview(path: str, max_lines: int) -> str:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            return "".join(islice(handle, max(0, max_lines))).rstrip("\n")
    except OSError:
        return ERROR_SENTINEL


def directory_preview(path: str, *, show_hidden: bool = True) -> str:
    try:
        names = sorted(os.listdir(path))
    except OSError:
        return ERROR_SENTINEL
    if not show_hidden:
        names = [name for name in names if not name.startswith(".")]
    return "\n".join(names)


def preview(path: str, max_lines: int, *, show_hidden: bool = True) -> str:
    if os.path.isdir(path):
        return directory_preview(path, show_hidden=show_hidden)
    if os.path.exists(path):
        return file_preview(path, max_lines)
    return ""


__all__ = [
    "ERROR_SENTINEL",
    "directory_preview",
    "disk_usage",
    "file_preview",
    "permissions",
    "preview",
    "user_at_host",
]
