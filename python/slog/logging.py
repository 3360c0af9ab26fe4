# JSON-structured logger: level gate, layered context fields, one line per event.

from __future__ import annotations
import threading
from typing import Any, Dict, List, Mapping, Optional, Protocol

from . import sinks
from .context import ScopeHandle, ScopedContext
from .errors import ContextError
from .formatter import build_record, format_record, trace_fields
from .levels import Level, parse

Fields = Optional[Mapping[str, Any]]

class LoggerLike(Protocol):
    name: str
    def debug(self, msg: str, fields: Fields = None, /, **kv: Any) -> None: ...
    def info(self, msg: str, fields: Fields = None, /, **kv: Any) -> None: ...
    def warning(self, msg: str, fields: Fields = None, /, **kv: Any) -> None: ...
    def error(self, msg: str, fields: Fields = None, /, **kv: Any) -> None: ...
    def critical(self, msg: str, fields: Fields = None, /, **kv: Any) -> None: ...
    def log(self, level: Any, msg: str, fields: Fields = None, /, **kv: Any) -> None: ...

def _merge(fields: Fields, kv: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(fields) if fields else {}
    if kv:
        out.update(kv)
    return out

class StructuredLogger:
    """A named logger writing one JSON object per line to ``output``.

    Fields are merged lowest to highest precedence: base layer (global +
    creation fields), permanent ``with_context`` layers, active scoped
    layers, per-call fields.
    """

    def __init__(self, name: str, level: Any = Level.INFO, fields: Fields = None, output: Optional[sinks.Sink] = None) -> None:
        self._name = name
        self._level = parse(level)
        self._base: Dict[str, Any] = dict(fields) if fields else {}
        self._layers: List[Dict[str, Any]] = []
        self._scopes: List[ScopeHandle] = []
        self._output = output
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"<StructuredLogger {self._name} level={self._level.name}>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def level(self) -> Level:
        return self._level

    @property
    def output(self) -> Optional[sinks.Sink]:
        return self._output

    @property
    def context(self) -> Dict[str, Any]:
        with self._lock:
            return self._collect()

    def set_level(self, level: Any) -> None:
        with self._lock:
            self._level = parse(level)

    def is_enabled_for(self, level: Any) -> bool:
        return parse(level) >= self._level

    # context layers

    def with_context(self, fields: Fields = None, /, **kv: Any) -> "StructuredLogger":
        layer = _merge(fields, kv)
        with self._lock:
            self._layers.append(layer)
        return self

    def clear_context(self) -> None:
        with self._lock:
            self._layers.clear()

    def update_base(self, fields: Fields = None, /, **kv: Any) -> None:
        with self._lock:
            self._base.update(_merge(fields, kv))

    def scope(self, fields: Fields = None, /, **kv: Any) -> ScopedContext:
        return ScopedContext(self, _merge(fields, kv))

    def _push_scope(self, handle: ScopeHandle) -> None:
        with self._lock:
            self._scopes.append(handle)

    def _pop_scope(self, handle: ScopeHandle) -> None:
        with self._lock:
            if not self._scopes or self._scopes[-1] is not handle:
                if any(h is handle for h in self._scopes):
                    raise ContextError(f"scope exited out of order on {self._name!r}: {handle!r}")
                raise ContextError(f"scope not active on {self._name!r}: {handle!r}")
            self._scopes.pop()

    def _collect(self) -> Dict[str, Any]:
        merged = dict(self._base)
        for layer in self._layers:
            merged.update(layer)
        for handle in self._scopes:
            merged.update(handle.fields)
        return merged

    def child(self, suffix: str, fields: Fields = None, /, **kv: Any) -> "StructuredLogger":
        with self._lock:
            base = dict(self._base)
            for layer in self._layers:
                base.update(layer)
            level = self._level
        base.update(_merge(fields, kv))
        return StructuredLogger(f"{self._name}.{suffix}", level=level, fields=base, output=self._output)

    # emission

    def log(self, level: Any, msg: str, fields: Fields = None, /, **kv: Any) -> None:
        lvl = parse(level)
        if lvl < self._level:
            return
        with self._lock:
            merged = trace_fields()
            merged.update(self._collect())
            if fields:
                merged.update(fields)
            if kv:
                merged.update(kv)
            line = format_record(build_record(lvl, self._name, msg, merged))
            sinks.write_line(self._output, line)

    def debug(self, msg: str, fields: Fields = None, /, **kv: Any) -> None:
        self.log(Level.DEBUG, msg, fields, **kv)

    def info(self, msg: str, fields: Fields = None, /, **kv: Any) -> None:
        self.log(Level.INFO, msg, fields, **kv)

    def warning(self, msg: str, fields: Fields = None, /, **kv: Any) -> None:
        self.log(Level.WARNING, msg, fields, **kv)

    warn = warning

    def error(self, msg: str, fields: Fields = None, /, **kv: Any) -> None:
        self.log(Level.ERROR, msg, fields, **kv)

    def critical(self, msg: str, fields: Fields = None, /, **kv: Any) -> None:
        self.log(Level.CRITICAL, msg, fields, **kv)

    def exception(self, msg: str, fields: Fields = None, /, **kv: Any) -> None:
        """Log at ERROR with the exception currently being handled."""
        kv.setdefault("exc_info", True)
        self.log(Level.ERROR, msg, fields, **kv)
