# Package exceptions.

class SlogError(Exception):
    """Base class for errors raised by slog."""

class ContextError(SlogError, RuntimeError):
    """A scoped context was exited out of order, twice, or never entered."""
