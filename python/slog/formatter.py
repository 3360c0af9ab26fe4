# JSON-lines rendering of a single log event.
# Core keys first, merged fields next, error descriptor last.

from __future__ import annotations
import json, math, sys, traceback
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from opentelemetry import trace

from .levels import Level, parse

CORE_KEYS = ("timestamp", "level", "logger", "message")
EXCEPTION_KEY = "exception"
EXC_INFO_KEY = "exc_info"

@dataclass
class ErrorInfo:
    error_type: str
    error_message: str
    stacktrace: List[str] = field(default_factory=list)

    @classmethod
    def from_exception(cls, exc: Any) -> "ErrorInfo":
        if not isinstance(exc, BaseException):
            return cls(type(exc).__name__, _safe_text(exc))
        # Outermost frame first, raising frame last.
        frames = traceback.extract_tb(exc.__traceback__)
        stack = [line.rstrip("\n") for line in frames.format()]
        return cls(type(exc).__name__, _safe_text(exc), stack)

@dataclass
class LogRecord:
    timestamp: datetime
    level: Level
    logger: str
    message: str
    fields: Dict[str, Any] = field(default_factory=dict)
    error: Optional[ErrorInfo] = None

def format_timestamp(ts: datetime) -> str:
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"

def trace_fields() -> Dict[str, str]:
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return {}
    return {
        "trace_id": trace.format_trace_id(ctx.trace_id),
        "span_id": trace.format_span_id(ctx.span_id),
    }

def build_record(level: Any, logger: str, message: Any, fields: Optional[Mapping[str, Any]] = None) -> LogRecord:
    """Assemble a LogRecord, expanding the reserved ``exception``/``exc_info`` keys."""
    flat: Dict[str, Any] = dict(fields) if fields else {}
    error: Optional[ErrorInfo] = None

    exc_info = flat.pop(EXC_INFO_KEY, None)
    if EXCEPTION_KEY in flat:
        error = ErrorInfo.from_exception(flat.pop(EXCEPTION_KEY))
    elif exc_info:
        if isinstance(exc_info, BaseException):
            error = ErrorInfo.from_exception(exc_info)
        elif isinstance(exc_info, tuple) and len(exc_info) == 3 and exc_info[1] is not None:
            error = ErrorInfo.from_exception(exc_info[1])
        else:
            current = sys.exc_info()[1]
            if current is not None:
                error = ErrorInfo.from_exception(current)

    return LogRecord(
        timestamp=datetime.now(timezone.utc),
        level=parse(level),
        logger=logger,
        message=_safe_text(message),
        fields=flat,
        error=error,
    )

def _safe_text(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        pass
    try:
        return repr(value)
    except Exception:
        return f"<unserializable {type(value).__name__}>"

def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<unserializable {type(value).__name__}>"

def _default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return _safe_text(value)

def _finite(value: Any, seen: Optional[set] = None) -> Any:
    # NaN and infinities have no JSON form; spell them as strings.
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return value
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        seen = set() if seen is None else seen
        if id(value) in seen:
            return "<circular>"
        seen.add(id(value))
        try:
            if isinstance(value, dict):
                return {k: _finite(v, seen) for k, v in value.items()}
            return [_finite(v, seen) for v in value]
        finally:
            seen.discard(id(value))
    return value

def _dumps(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False, default=_default)

def to_dict(record: LogRecord) -> Dict[str, Any]:
    rec: Dict[str, Any] = {
        "timestamp": format_timestamp(record.timestamp),
        "level": record.level.name,
        "logger": record.logger,
        "message": record.message,
    }
    for key, value in record.fields.items():
        if key not in CORE_KEYS:
            rec[str(key)] = value
    if record.error is not None:
        rec["error_type"] = record.error.error_type
        rec["error_message"] = record.error.error_message
        rec["stacktrace"] = list(record.error.stacktrace)
    return rec

def format_record(record: LogRecord) -> str:
    """Render a record as one line of JSON (no trailing newline)."""
    rec = to_dict(record)
    try:
        return _dumps(rec)
    except (TypeError, ValueError, RecursionError):
        pass
    # Best effort: non-finite floats spelled out, anything else unencodable becomes its repr.
    for key, value in list(rec.items()):
        try:
            _dumps(value)
            continue
        except (TypeError, ValueError, RecursionError):
            pass
        try:
            cleaned = _finite(value)
            _dumps(cleaned)
            rec[key] = cleaned
        except (TypeError, ValueError, RecursionError):
            rec[key] = _safe_repr(value)
    return _dumps(rec)
