# Sink abstraction: anything with write(str). flush() is used when present.

from __future__ import annotations
import sys
from typing import Optional, Protocol

__all__ = ["Sink", "resolve", "write_line", "flush"]

class Sink(Protocol):
    def write(self, s: str) -> object: ...

def resolve(sink: Optional[Sink]) -> Sink:
    # None tracks the current stdout so redirected/captured streams are honoured.
    return sys.stdout if sink is None else sink

def write_line(sink: Optional[Sink], line: str) -> None:
    out = resolve(sink)
    out.write(line + "\n")
    flush = getattr(out, "flush", None)
    if flush is not None:
        flush()

def flush(sink: Optional[Sink]) -> None:
    out = resolve(sink)
    fn = getattr(out, "flush", None)
    if fn is not None:
        fn()
