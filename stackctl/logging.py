from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "stackctl.log"


def resolve_log_file(settings: object) -> Path:
    """Resolve the log file path from settings.

    A relative `STACK_CTL_LOG_DIR` is taken relative to the current directory.
    """

    raw = getattr(settings, "STACK_CTL_LOG_DIR", Path("_logs"))
    p = raw if isinstance(raw, Path) else Path(str(raw))
    return p.expanduser() / LOG_FILE_NAME


def setup_logging(settings: object, console: bool = False) -> Path:
    """Configure Python logging to write to a rotating diagnostic log file.

    Returns the resolved log file path.

    Rotation:
      - Daily rotation at midnight.
      - Keep the last `STACK_CTL_LOG_BACKUP_COUNT` rotated files.

    Notes:
      - The full-screen menu owns the terminal, so the interactive entrypoint
        passes `console=False`; plain CLI commands also echo to stderr.
      - This function is safe to call multiple times (it resets handlers).
    """

    log_file = resolve_log_file(settings)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    level_name = str(getattr(settings, "STACK_CTL_LOG_LEVEL", "INFO") or "INFO").upper().strip()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    file_handler = TimedRotatingFileHandler(
        filename=str(log_file),
        when="midnight",
        interval=1,
        backupCount=max(0, int(getattr(settings, "STACK_CTL_LOG_BACKUP_COUNT", 7) or 0)),
        encoding="utf-8",
        utc=False,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(fmt))

    # Reset root handlers so we don't duplicate logs on repeated starts.
    root = logging.getLogger()
    for handler in root.handlers:
        handler.close()
    root.handlers = []
    root.setLevel(level)
    root.addHandler(file_handler)

    if console:
        # Message only, no prefix.
        console_handler = logging.StreamHandler()
        console_handler.setLevel(max(level, logging.WARNING))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(console_handler)

    logging.getLogger("stackctl").debug(
        "stackctl logging enabled (file=%s, level=%s, console=%s)",
        os.fspath(log_file),
        level_name,
        console,
    )

    return log_file


def log_files(settings: object) -> list[Path]:
    """The current log file and its rotated siblings, newest first."""
    current = resolve_log_file(settings)
    if not current.parent.is_dir():
        return []
    files = [p for p in current.parent.glob(f"{LOG_FILE_NAME}*") if p.is_file()]
    return sorted(files, key=lambda p: (p != current, -p.stat().st_mtime))


def tail_log(path: Path, lines: int = 40) -> list[str]:
    """Last `lines` lines of a log file (missing file -> FileNotFoundError)."""
    text = path.read_text(encoding="utf-8", errors="replace")
    out = text.splitlines()
    if lines <= 0:
        return out
    return out[-lines:]


def clear_logs(settings: object) -> int:
    """Truncate the live log file and delete rotated ones.

    The live file stays in place because the file handler keeps it open.

    Returns:
        Number of files cleared
    """
    current = resolve_log_file(settings)
    cleared = 0
    for path in log_files(settings):
        if path == current:
            path.write_text("", encoding="utf-8")
        else:
            path.unlink()
        cleared += 1
    return cleared


def write_entry(level: str, message: str) -> str:
    """Write an operator note to the log at `level` (unknown levels -> INFO).

    Returns:
        The level name actually used
    """
    level_name = str(level or "INFO").upper().strip()
    if not isinstance(logging.getLevelName(level_name), int):
        level_name = "INFO"
    logging.getLogger("stackctl.operator").log(logging.getLevelName(level_name), "%s", message)
    return level_name
