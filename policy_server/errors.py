"""
Error taxonomy for the Policy Server.

``ValidationError`` and ``AuthorizationError`` are raised by admin operations
and the admin boundary and mapped to 400 / 401 by the app. Storage failures
are deliberately absent: they propagate as unhandled faults.
"""


class PolicyServerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PolicyServerError):
    """Missing or blank required identifier; nothing was mutated."""
    status_code = 400


class AuthorizationError(PolicyServerError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class EnvelopeError(Exception):
    """Raised by agent-side envelope verification."""


class SignatureMismatch(EnvelopeError):
    pass


class EnvelopeExpired(EnvelopeError):
    pass


class MalformedEnvelope(EnvelopeError):
    """Envelope is missing fields or carries values of the wrong type."""
