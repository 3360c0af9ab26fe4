# Wrap callables so their execution or failures are logged.

from __future__ import annotations
import functools, time
from typing import Any, Callable, Optional, TypeVar

from .levels import Level, parse
from .logging import LoggerLike

F = TypeVar("F", bound=Callable[..., Any])

def _fname(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", None) or getattr(func, "__name__", repr(func))

def log_execution(logger: LoggerLike, level: Any = Level.INFO, include_args: bool = False, include_result: bool = False) -> Callable[[F], F]:
    """Log entry and successful exit of the wrapped function.

    Failures propagate untouched and produce no exit record; combine with
    ``log_errors`` to record them.
    """
    lvl = parse(level)

    def decorator(func: F) -> F:
        name = _fname(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            entry = {"event": "function_entry", "function": name}
            if include_args:
                entry["args"] = list(args)
                if kwargs:
                    entry["kwargs"] = dict(kwargs)
            logger.log(lvl, f"Entering {name}", entry)

            start = time.perf_counter()
            result = func(*args, **kwargs)
            duration_ms = (time.perf_counter() - start) * 1000.0

            done = {"event": "function_exit", "function": name, "status": "success",
                    "duration_ms": round(max(duration_ms, 0.0), 3)}
            if include_result:
                done["result"] = result
            logger.log(lvl, f"Exiting {name}", done)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator

def log_errors(logger: LoggerLike, level: Any = Level.ERROR, message: Optional[str] = None) -> Callable[[F], F]:
    """Log an uncaught exception from the wrapped function, then re-raise it."""
    lvl = parse(level)

    def decorator(func: F) -> F:
        name = _fname(func)
        msg = message or f"Error in {name}"

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                logger.log(lvl, msg, {"event": "function_error", "function": name, "exception": exc})
                raise

        return wrapper  # type: ignore[return-value]

    return decorator
