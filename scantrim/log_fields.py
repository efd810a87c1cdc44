"""Key-value log records and root logger setup."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(filename)s:%(lineno)d | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _format_value(value: Any) -> str:
    text = str(value)
    if not text or any(c in text for c in ' ="'):
        return '"' + text.replace('"', '\\"') + '"'
    return text


def format_fields(fields: Dict[str, Any]) -> str:
    """Render fields as ``key=value`` pairs in insertion order."""
    return " ".join(f"{key}={_format_value(value)}" for key, value in fields.items())


class FieldsAdapter(logging.LoggerAdapter):
    """LoggerAdapter that appends bound and per-call fields to the message.

    Per-call fields are passed as ``fields={...}``; they are also exposed to
    handlers as ``record.fields``.

    Example:
        log = FieldsAdapter(logger, {"file": "scan.pdf"})
        log.info("processing page", fields={"page": 1})
        # -> processing page file=scan.pdf page=1
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, dict(extra or {}))

    def process(self, msg, kwargs):
        fields = dict(self.extra)
        fields.update(kwargs.pop("fields", None) or {})
        extra = dict(kwargs.get("extra") or {})
        extra["fields"] = fields
        kwargs["extra"] = extra
        if fields:
            msg = f"{msg} {format_fields(fields)}"
        return msg, kwargs

    def bind(self, **fields: Any) -> "FieldsAdapter":
        """Return a child adapter carrying additional bound fields."""
        merged = dict(self.extra)
        merged.update(fields)
        return FieldsAdapter(self.logger, merged)


def get_logger(name: str, **fields: Any) -> FieldsAdapter:
    return FieldsAdapter(logging.getLogger(name), fields)


def setup_logging(*, verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure the root logger: console handler plus optional rotating log file."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_level = logging.DEBUG if verbose else logging.INFO
    root_logger.setLevel(logging.DEBUG if log_file is not None else console_level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=20 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, DATE_FORMAT))
        root_logger.addHandler(file_handler)

    # PIL logs every decoder plugin at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)
