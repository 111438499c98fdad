"""Wren exception hierarchy.

Shared across Router, App, RequestContext and the session codec so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app configuration is invalid.

    Route patterns that fail to compile raise this at registration time,
    before the app serves a single request.
    """


class InvalidArgument(WrenError, ValueError):
    """A constructor received an argument outside its domain."""


class DoubleReply(WrenError):
    """A request context was replied to more than once.

    Never raised to the handler. The context logs it as critical and
    keeps the first reply.
    """


# -- Session verification --


class SessionError(WrenError):
    """Base for session encode/decode failures.

    The request context treats every subclass the same way: log it and
    continue with a fresh, empty session.
    """


class SigningKeyMissing(SessionError):  # noqa: N818
    """No signing key is configured (``AppConfig.secret_key`` is empty)."""

    def __init__(self, detail: str = "Session signing key is not defined") -> None:
        super().__init__(detail)


class InvalidSignature(SessionError):  # noqa: N818
    """The token's HMAC does not match its payload and timestamp."""

    def __init__(self, detail: str = "Signature is invalid") -> None:
        super().__init__(detail)


class SessionExpired(SessionError):  # noqa: N818
    """The token was issued more than ``ttl`` seconds ago."""

    def __init__(self, detail: str = "Session has expired") -> None:
        super().__init__(detail)


class MalformedToken(SessionError):  # noqa: N818
    """The token is not ``payload|timestamp|signature``."""

    def __init__(self, detail: str = "Session token is malformed") -> None:
        super().__init__(detail)


class MalformedPayload(SessionError):  # noqa: N818
    """The signed payload is not base64-encoded JSON object data."""

    def __init__(self, detail: str = "Session payload is malformed") -> None:
        super().__init__(detail)


# -- Handler faults --


@dataclass(frozen=True, slots=True)
class HandlerFault:
    """A handler that terminated abnormally, captured as a value.

    Produced by ``wren.server.errors.protect`` instead of letting the
    exception escape the dispatcher.
    """

    exception: BaseException
    traceback: str

    def __str__(self) -> str:
        return f"handler crashed: {self.exception!r}"
