"""Handlers for the ``notesynth`` logger tree.

Console output goes to stderr (INFO, or DEBUG with ``NOTESYNTH_DEBUG``); a
DEBUG-level copy of every record is appended to ``notesynth.log`` under
``NOTESYNTH_LOG_DIR``.
"""

from __future__ import annotations

import logging
import os
import sys
import traceback
from datetime import datetime
from pathlib import Path

LOG_DIR_ENV = "NOTESYNTH_LOG_DIR"
DEBUG_ENV = "NOTESYNTH_DEBUG"
LOG_FILE_NAME = "notesynth.log"

_PACKAGE_LOGGER = "notesynth"
_LOGGER = logging.getLogger("notesynth.logging")
_RECORD_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"


def debug_enabled() -> bool:
    return bool(os.environ.get(DEBUG_ENV))


def get_log_dir() -> Path:
    override = os.environ.get(LOG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".cache" / "notesynth" / "logs"


def get_log_path() -> Path:
    return get_log_dir() / LOG_FILE_NAME


def _owned_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "notesynth_owned", False)]


def configure_logging(*, force: bool = False) -> None:
    """Attach console and file handlers once; ``force`` rebuilds them."""
    logger = logging.getLogger(_PACKAGE_LOGGER)
    owned = _owned_handlers(logger)
    if owned and not force:
        return
    for handler in owned:
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)
    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.__stderr__)
    console.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handlers.append(console)

    try:
        get_log_dir().mkdir(parents=True, exist_ok=True)
        logfile = logging.FileHandler(get_log_path(), encoding="utf-8")
    except OSError as exc:
        _LOGGER.warning("File logging disabled: %s", exc)
    else:
        logfile.setLevel(logging.DEBUG)
        logfile.setFormatter(logging.Formatter(_RECORD_FORMAT))
        handlers.append(logfile)

    for handler in handlers:
        handler.notesynth_owned = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


def log_exception(context: str, exc: BaseException) -> Path | None:
    """Append a timestamped traceback to the log file; None if it can't be written."""
    path = get_log_path()
    lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
    entry = f"{datetime.now():%Y-%m-%d %H:%M:%S} {context} failed\n{''.join(lines)}\n"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(entry)
    except OSError as write_exc:
        _LOGGER.warning("Could not record %s failure in %s: %s", context, path, write_exc)
        return None
    return path
