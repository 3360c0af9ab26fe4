"""Shared fixtures: in-memory sinks and a factory writing to them."""

import io
import json
import pytest

from slog import LoggerFactory


def read_records(sink):
    return [json.loads(line) for line in sink.getvalue().splitlines() if line]


@pytest.fixture
def sink():
    return io.StringIO()


@pytest.fixture
def records(sink):
    return lambda: read_records(sink)


@pytest.fixture
def factory(sink):
    return LoggerFactory(default_level="DEBUG", output=sink)
