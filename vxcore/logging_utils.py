from __future__ import annotations

import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, plus exc when set."""

    def format(self, record: logging.LogRecord) -> str:
        obj: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            obj["exc"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=True)


def setup_logging(*, level: str | None = None, log_file: str | None = None, log_format: str | None = None) -> None:
    """
    Configure stdlib logging for the vxcore CLI.

    Defaults:
    - level: VXCORE_LOG_LEVEL or "warning"
    - log_file: VXCORE_LOG_FILE or none (stderr only)
    - log_format: VXCORE_LOG_FORMAT or "text" ("text" | "jsonl")
    """
    lvl = (level or os.getenv("VXCORE_LOG_LEVEL") or "warning").strip().upper()
    numeric = getattr(logging, lvl, None)
    if not isinstance(numeric, int):
        numeric = logging.WARNING

    lf = log_file if log_file is not None else (os.getenv("VXCORE_LOG_FILE") or "")
    lf = lf.strip()
    fmt = (log_format or os.getenv("VXCORE_LOG_FORMAT") or "text").strip().lower()
    if fmt not in {"text", "jsonl", "json"}:
        fmt = "text"

    handlers: list[logging.Handler] = []
    if lf:
        p = Path(lf).expanduser().resolve()
        p.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                str(p),
                encoding="utf-8",
                maxBytes=100_000,
                backupCount=3,
            )
        )
    handlers.append(logging.StreamHandler(sys.stderr))

    if fmt in {"jsonl", "json"}:
        formatter: logging.Formatter = _JsonLineFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s pid=%(process)d %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    for h in handlers:
        h.setFormatter(formatter)

    logging.basicConfig(level=numeric, handlers=handlers, force=True)
    logging.getLogger(__name__).debug(
        "logging configured level=%s format=%s log_file=%s",
        logging.getLevelName(numeric),
        ("jsonl" if fmt in {"jsonl", "json"} else "text"),
        (str(Path(lf).expanduser().resolve()) if lf else "(stderr)"),
    )
