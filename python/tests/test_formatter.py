import io
import json
import re
from datetime import datetime, timezone

from opentelemetry import trace
from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags

from slog import StructuredLogger
from slog.formatter import ErrorInfo, build_record, format_record, format_timestamp
from slog.levels import Level


def _boom():
    return 1 / 0


def test_single_line_with_core_keys_first():
    line = format_record(build_record("INFO", "app", "hello\nworld", {"user": "zoë"}))
    assert "\n" not in line
    rec = json.loads(line)
    assert list(rec)[:4] == ["timestamp", "level", "logger", "message"]
    assert rec["level"] == "INFO"
    assert rec["logger"] == "app"
    assert rec["message"] == "hello\nworld"
    assert rec["user"] == "zoë"


def test_timestamp_millisecond_utc():
    ts = datetime(2026, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
    assert format_timestamp(ts) == "2026-01-02T03:04:05.678Z"
    rec = json.loads(format_record(build_record("INFO", "a", "m")))
    assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z", rec["timestamp"])


def test_fields_cannot_clobber_core_keys():
    rec = json.loads(format_record(build_record("WARNING", "a", "m", {"level": "DEBUG", "logger": "x"})))
    assert rec["level"] == "WARNING"
    assert rec["logger"] == "a"


def test_zero_division_expanded():
    try:
        _boom()
    except ZeroDivisionError as exc:
        rec = json.loads(format_record(build_record("ERROR", "a", "failed", {"exception": exc, "k": 1})))
    assert "exception" not in rec
    assert rec["error_type"] == "ZeroDivisionError"
    assert "division" in rec["error_message"]
    assert rec["stacktrace"]
    # raising frame is last
    assert "_boom" in rec["stacktrace"][-1]
    assert "test_zero_division_expanded" in rec["stacktrace"][0]
    assert rec["k"] == 1


def test_unraised_exception_has_empty_stack():
    info = ErrorInfo.from_exception(ValueError("bad"))
    assert (info.error_type, info.error_message, info.stacktrace) == ("ValueError", "bad", [])


def test_non_exception_value_still_intercepted():
    rec = json.loads(format_record(build_record("ERROR", "a", "m", {"exception": "plain text"})))
    assert "exception" not in rec
    assert rec["error_type"] == "str"
    assert rec["error_message"] == "plain text"


def test_exc_info_true_captures_current_exception():
    try:
        raise KeyError("missing")
    except KeyError:
        record = build_record(Level.ERROR, "a", "m", {"exc_info": True})
    assert record.error.error_type == "KeyError"
    assert "exc_info" not in record.fields


def test_exc_info_false_dropped():
    rec = json.loads(format_record(build_record("INFO", "a", "m", {"exc_info": False})))
    assert "exc_info" not in rec and "error_type" not in rec


def test_non_serializable_values_coerced():
    class Thing:
        def __str__(self):
            return "thing!"

    when = datetime(2026, 1, 1, tzinfo=timezone.utc)
    rec = json.loads(format_record(build_record("INFO", "a", "m", {
        "obj": Thing(), "when": when, "tags": {"x"}, "pair": (1, 2), "raw": b"hi",
    })))
    assert rec["obj"] == "thing!"
    assert rec["when"] == when.isoformat()
    assert rec["tags"] == ["x"]
    assert rec["pair"] == [1, 2]
    assert rec["raw"] == "hi"


def test_unencodable_field_falls_back_to_repr():
    loop = []
    loop.append(loop)
    rec = json.loads(format_record(build_record("INFO", "a", "m", {"loop": loop, "bad_keys": {(1, 2): "v"}, "ok": 1})))
    assert rec["loop"] == ["<circular>"]
    assert isinstance(rec["bad_keys"], str)
    assert rec["ok"] == 1


def test_trace_ids_attached_inside_span():
    ctx = SpanContext(trace_id=0x1234, span_id=0xabcd, is_remote=False, trace_flags=TraceFlags(TraceFlags.SAMPLED))
    out = io.StringIO()
    log = StructuredLogger("traced", output=out)
    with trace.use_span(NonRecordingSpan(ctx)):
        log.info("inside")
    log.info("outside")
    inside, outside = [json.loads(line) for line in out.getvalue().splitlines()]
    assert inside["trace_id"] == "%032x" % 0x1234
    assert inside["span_id"] == "%016x" % 0xabcd
    assert "trace_id" not in outside


def _reject_constant(token):
    raise ValueError(f"non-JSON constant {token}")


def test_non_finite_floats_are_strict_json():
    line = format_record(build_record("INFO", "a", "ratio", {
        "r": float("nan"), "i": float("inf"), "n": float("-inf"),
        "nested": {"xs": [1.5, float("nan")]}, "ok": 2.5,
    }))
    rec = json.loads(line, parse_constant=_reject_constant)
    assert (rec["r"], rec["i"], rec["n"]) == ("NaN", "Infinity", "-Infinity")
    assert rec["nested"] == {"xs": [1.5, "NaN"]}
    assert rec["ok"] == 2.5


def test_failing_str_does_not_lose_the_record():
    class NoStr:
        def __str__(self):
            raise RuntimeError("no str")

        def __repr__(self):
            return "<NoStr>"

    class Hopeless:
        def __str__(self):
            raise RuntimeError("no str")

        def __repr__(self):
            raise RuntimeError("no repr")

    rec = json.loads(format_record(build_record("INFO", "a", "obj", {"o": NoStr(), "h": Hopeless(), "ok": 1})))
    assert rec["o"] == "<NoStr>"
    assert rec["h"] == "<unserializable Hopeless>"
    assert rec["ok"] == 1
