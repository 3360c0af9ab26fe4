# Process bootstrap: build the LoggerFactory a service passes around.
from __future__ import annotations
import os
from typing import Any, Dict, Mapping, Optional

from . import sinks
from .factory import LoggerFactory
from .levels import parse

LEVEL_ENV = "LOG_LEVEL"

def init(
    service_name: str,
    service_version: str = "",
    environment: str = "dev",
    default_level: Optional[str] = None,
    global_fields: Optional[Mapping[str, Any]] = None,
    output: Optional[sinks.Sink] = None,
) -> LoggerFactory:
    """Create a LoggerFactory stamped with service identity.

    Every logger it hands out carries ``service``, ``version`` (when set) and
    ``env``. ``default_level`` falls back to ``$LOG_LEVEL``, then INFO.
    """
    fields: Dict[str, Any] = {"service": service_name}
    if service_version:
        fields["version"] = service_version
    fields["env"] = environment
    if global_fields:
        fields.update(global_fields)
    if default_level is None:
        default_level = os.environ.get(LEVEL_ENV, "INFO")
    return LoggerFactory(default_level=parse(default_level), global_fields=fields, output=output)

def shutdown(factory: LoggerFactory) -> None:
    """Flush the factory's sink."""
    sinks.flush(factory.output)
