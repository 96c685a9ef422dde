"""
Error taxonomy for tripledoc.

Remote-facing errors (parsing, transport, conflicts) propagate to the caller
unchanged. DecodeError is the only recoverable one: typed getters catch it
and report the value as absent.
"""

from typing import Optional


class TripledocError(Exception):
    """Base class for all tripledoc errors."""
    pass


class ParseError(TripledocError):
    """Raised when a serialized graph cannot be parsed into statements."""

    def __init__(self, message: str, base_ref: Optional[str] = None):
        self.base_ref = base_ref
        if base_ref:
            message = f"Could not parse {base_ref}: {message}"
        super().__init__(message)


class DecodeError(TripledocError):
    """Raised when a literal's lexical form does not match its datatype."""

    def __init__(self, lexical: str, datatype: str, reason: str = ""):
        self.lexical = lexical
        self.datatype = datatype
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Cannot decode {lexical!r} as <{datatype}>{detail}")


class RemoteError(TripledocError):
    """Raised when a remote read or write fails."""
    pass


class NetworkError(RemoteError):
    """Raised when the remote server could not be reached at all."""

    def __init__(self, ref: str, cause: Optional[BaseException] = None):
        self.ref = ref
        self.cause = cause
        super().__init__(f"Network error while accessing {ref}: {cause}")


class HttpError(RemoteError):
    """Raised when the server answers with a non-success status."""

    def __init__(self, ref: str, status_code: int, message: str = ""):
        self.ref = ref
        self.status_code = status_code
        self.message = message
        text = f"{ref} responded with HTTP {status_code}"
        if message:
            text += f": {message}"
        super().__init__(text)


class ConflictError(HttpError):
    """Raised when creating a document that already exists remotely."""
    pass
