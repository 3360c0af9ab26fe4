__all__ = [
    "Level", "parse_level", "rank",
    "LogRecord", "ErrorInfo", "build_record", "format_record",
    "StructuredLogger", "ScopedContext", "ScopeHandle", "enter_scope", "exit_scope",
    "LoggerFactory", "log_execution", "log_errors",
    "StructuredHandler", "install_handler",
    "SlogError", "ContextError",
    "init", "shutdown",
]
__version__ = "0.1.0"

from .levels import Level, rank
from .levels import parse as parse_level
from .formatter import LogRecord, ErrorInfo, build_record, format_record
from .logging import StructuredLogger
from .context import ScopedContext, ScopeHandle
from .context import enter as enter_scope, exit as exit_scope
from .factory import LoggerFactory
from .decorators import log_execution, log_errors
from .handler import StructuredHandler, install_handler
from .errors import SlogError, ContextError
from .bootstrap import init, shutdown
