# Bridge stdlib logging into a LoggerFactory so library logs come out as the same JSON lines.

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from .factory import LoggerFactory
from .levels import Level

# Attributes every stdlib LogRecord carries; anything else came from ``extra=``.
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()) | {"message", "asctime"}

def _to_level(levelno: int) -> Level:
    chosen = Level.DEBUG
    for lvl in Level:
        if levelno >= lvl:
            chosen = lvl
    return chosen

class StructuredHandler(logging.Handler):
    """Forward stdlib records to ``factory.get_logger(record.name)``."""

    def __init__(self, factory: LoggerFactory, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.factory = factory

    def emit(self, record: logging.LogRecord) -> None:
        try:
            fields: Dict[str, Any] = {k: v for k, v in vars(record).items() if k not in _RESERVED}
            if record.exc_info and record.exc_info[1] is not None:
                fields["exception"] = record.exc_info[1]
            self.factory.get_logger(record.name).log(_to_level(record.levelno), record.getMessage(), fields)
        except Exception:
            self.handleError(record)

def install_handler(factory: LoggerFactory, logger_name: Optional[str] = None, level: int = logging.NOTSET) -> StructuredHandler:
    """Attach a StructuredHandler to ``logger_name`` (root by default) and return it."""
    handler = StructuredHandler(factory, level)
    target = logging.getLogger(logger_name)
    target.addHandler(handler)
    return handler
