# Registry guaranteeing one StructuredLogger per name.

from __future__ import annotations
import threading
from typing import Any, Dict, List, Mapping, Optional

from . import sinks
from .levels import Level, parse
from .logging import StructuredLogger

class LoggerFactory:
    """Explicit logger registry. Create one at startup and pass it around.

    ``get_logger`` is insert-if-absent under a lock: the first call for a
    name decides its creation fields, later calls return the same instance.
    """

    def __init__(self, default_level: Any = Level.INFO, global_fields: Optional[Mapping[str, Any]] = None, output: Optional[sinks.Sink] = None) -> None:
        self._default_level = parse(default_level)
        self._global_fields: Dict[str, Any] = dict(global_fields) if global_fields else {}
        self._output = output
        self._loggers: Dict[str, StructuredLogger] = {}
        self._lock = threading.Lock()

    @property
    def default_level(self) -> Level:
        return self._default_level

    @property
    def global_fields(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._global_fields)

    @property
    def output(self) -> Optional[sinks.Sink]:
        return self._output

    def get_logger(self, name: str, fields: Optional[Mapping[str, Any]] = None, /, **kv: Any) -> StructuredLogger:
        with self._lock:
            logger = self._loggers.get(name)
            if logger is None:
                base = dict(self._global_fields)
                if fields:
                    base.update(fields)
                base.update(kv)
                logger = StructuredLogger(name, level=self._default_level, fields=base, output=self._output)
                self._loggers[name] = logger
            return logger

    def set_global_level(self, level: Any) -> None:
        lvl = parse(level)
        with self._lock:
            self._default_level = lvl
            loggers = list(self._loggers.values())
        for logger in loggers:
            logger.set_level(lvl)

    def add_global_fields(self, fields: Optional[Mapping[str, Any]] = None, /, **kv: Any) -> None:
        extra = dict(fields) if fields else {}
        extra.update(kv)
        with self._lock:
            self._global_fields.update(extra)
            loggers = list(self._loggers.values())
        for logger in loggers:
            logger.update_base(extra)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._loggers)

    def reset(self) -> None:
        with self._lock:
            self._loggers.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._loggers

    def __len__(self) -> int:
        return len(self._loggers)
