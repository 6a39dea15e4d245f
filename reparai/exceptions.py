"""Exception hierarchy for the diagnostic funnel."""


class ReparaiError(Exception):
    """Base exception for all reparai errors."""


class GenerationError(ReparaiError):
    """Raised when the question generator fails, times out, or returns malformed data."""

    def __init__(self, message: str, *, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


class AnalysisError(ReparaiError):
    """Raised when the request analyzer fails, times out, or returns malformed data."""


class FunnelError(ReparaiError):
    """Base exception for invalid funnel operations."""


class FunnelStateError(FunnelError):
    """Raised when an operation does not fit the current funnel state."""


class FunnelBusyError(FunnelError):
    """Raised when a generation call is already in flight for the funnel."""


class FunnelClosedError(FunnelError):
    """Raised when operating on a funnel the caller already closed."""


class InvalidAnswerError(FunnelError):
    """Raised when a submitted answer is empty or otherwise unusable."""


class SessionNotFoundError(ReparaiError):
    """Raised when a funnel session id is unknown or expired."""
