"""Application-level exception types for babel-magma."""

from __future__ import annotations


class BabelMagmaError(Exception):
    """Base exception for babel-magma."""


class ConfigurationError(BabelMagmaError):
    """Raised when block parameters or settings cannot be interpreted."""


class SessionStartError(BabelMagmaError):
    """Raised when the interactive Magma process cannot be spawned."""


class TransportError(BabelMagmaError):
    """Base exception for failures while talking to a session process."""


class TransportTimeout(TransportError):
    """Raised when the end-of-output marker does not arrive in time."""


class TransportCancelled(TransportError):
    """Raised when a pending read is cancelled by its caller."""


class SessionClosedError(TransportError):
    """Raised when the session process exits while output is awaited."""


class RemoteTransportError(BabelMagmaError):
    """Raised when the remote calculator cannot be reached or answers with an error."""


class MalformedResponseError(BabelMagmaError):
    """Raised when the remote calculator response is not the expected XML."""


class LiteralParseError(BabelMagmaError):
    """Raised when text is not a well-formed literal in strict mode."""
