# Temporary context layers pushed for the duration of a block.

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from .errors import ContextError

if TYPE_CHECKING:
    from .logging import StructuredLogger

class ScopeHandle:
    """Identifies one pushed layer. Compared by identity, never by content."""

    __slots__ = ("logger", "fields", "active")

    def __init__(self, logger: "StructuredLogger", fields: Dict[str, Any]) -> None:
        self.logger = logger
        self.fields = fields
        self.active = True

    def __repr__(self) -> str:
        state = "active" if self.active else "exited"
        return f"<ScopeHandle {self.logger.name} {state} keys={sorted(self.fields)}>"

def enter(logger: "StructuredLogger", fields: Optional[Mapping[str, Any]] = None, /, **kw: Any) -> ScopeHandle:
    layer = dict(fields) if fields else {}
    layer.update(kw)
    handle = ScopeHandle(logger, layer)
    logger._push_scope(handle)
    return handle

def exit(handle: ScopeHandle) -> None:
    if not handle.active:
        raise ContextError(f"scope already exited: {handle!r}")
    handle.logger._pop_scope(handle)
    handle.active = False

class ScopedContext:
    """Push ``fields`` onto ``logger`` on entry, pop them on every exit path.

        with log.scope(op="query"):
            log.info("running")   # carries op=query
    """

    def __init__(self, logger: "StructuredLogger", fields: Optional[Mapping[str, Any]] = None, /, **kw: Any) -> None:
        self.logger = logger
        self.fields: Dict[str, Any] = dict(fields) if fields else {}
        self.fields.update(kw)
        self._handle: Optional[ScopeHandle] = None

    def __enter__(self) -> "StructuredLogger":
        if self._handle is not None:
            raise ContextError(f"scope on {self.logger.name!r} is already active")
        self._handle = enter(self.logger, self.fields)
        return self.logger

    def __exit__(self, exc_type, exc, tb) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            raise ContextError(f"scope on {self.logger.name!r} was never entered")
        exit(handle)
