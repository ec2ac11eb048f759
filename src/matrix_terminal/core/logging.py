"""Application logging setup and log-value sanitising."""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path
from typing import Any

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
_MAX_OUTPUT_LEN = 2_000

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def sanitize(value: Any) -> Any:
    """Strip ANSI escapes and truncate large strings."""
    if isinstance(value, str):
        cleaned = _ANSI_RE.sub("", value)
        if len(cleaned) > _MAX_OUTPUT_LEN:
            cleaned = cleaned[:_MAX_OUTPUT_LEN] + f"... (truncated, {len(cleaned)} total)"
        return cleaned
    if isinstance(value, dict):
        return {k: sanitize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [sanitize(v) for v in value]
    return value


def setup_logging(
    log_level: str = "INFO",
    app_log_path: Path | None = None,
    *,
    console: bool = True,
) -> None:
    """Configure application logging.

    ``console=False`` keeps log lines off stderr, which the interactive
    terminal needs so records don't tear the prompt. Records then go to
    ``app_log_path`` only, if one is given.
    """
    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    if app_log_path:
        app_log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(app_log_path)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
