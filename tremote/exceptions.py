"""
Exceptions raised by the RPC transport and the command layer.
"""


class RpcError(Exception):
    """Base exception for all daemon communication errors."""


class DaemonConnectionError(RpcError, ConnectionError):
    """Raised when the byte stream to the daemon cannot be opened or used."""


class RpcTimeoutError(DaemonConnectionError):
    """Raised when the daemon stops sending before a frame is complete."""


class ConflictError(RpcError):
    """
    Raised when the daemon answers 409 because the session token is missing
    or stale. The new token is carried on the exception.
    """

    def __init__(self, token: str):
        super().__init__(f"Session token rejected by daemon (new token: {token!r})")
        self.token = token


class DecodeError(RpcError):
    """Raised when a response cannot be parsed or its body is not valid JSON."""


class IncompleteFrameError(DecodeError):
    """Raised when the connection closed before the declared body arrived."""


class ApplicationError(RpcError):
    """Raised when the daemon reports a result other than "success"."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
