"""Logging setup shared by the Streamlit app, the CLI and the library modules.

Console output goes to stdout at ``LOG_LEVEL``; a daily file under
``LOG_DIR`` (default ``logs/``) always receives DEBUG.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

_DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_HANDLER_TAG = "_cvoptimize"
# third-party loggers that are chatty at INFO
_NOISY = ("urllib3", "httpx", "httpcore", "openai", "streamlit", "pypdf")
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def set_console_level(level: int | str) -> None:
    """Change the console verbosity after startup (``--verbose`` on the CLI)."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(min(root.level, level))
    for handler in root.handlers:
        if getattr(handler, _HANDLER_TAG, "") == "console":
            handler.setLevel(level)


def log_file_path(day: datetime | None = None) -> Path:
    log_dir = Path(os.environ.get("LOG_DIR") or _DEFAULT_LOG_DIR)
    return log_dir / f"cvoptimize_{(day or datetime.now()).strftime('%Y-%m-%d')}.log"


def _tagged(handler: logging.Handler, kind: str) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, kind)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    return handler


def _configure() -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for name in _NOISY:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Streamlit re-imports modules on every rerun; never stack handlers twice
    kinds = {getattr(h, _HANDLER_TAG, "") for h in root.handlers}

    if "console" not in kinds:
        console = _tagged(logging.StreamHandler(sys.stdout), "console")
        console.setLevel(level)
        root.addHandler(console)

    if "file" not in kinds:
        try:
            path = log_file_path()
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = _tagged(logging.FileHandler(path, encoding="utf-8"), "file")
            fh.setLevel(logging.DEBUG)
            root.addHandler(fh)
        except OSError:
            # read-only deployments (e.g. Streamlit Cloud) still get console logs
            pass
