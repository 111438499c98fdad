"""Cookie parsing and Set-Cookie rendering.

Consolidates the read side (parse_cookies, used by Request) and the
write side (Cookie, used by RequestContext.set_cookie) in one module.
"""

import time
from enum import Enum

from wren.errors import InvalidArgument
from wren.http.dates import FAR_FUTURE_EPOCH, http_date

DELETED_VALUE = "DELETED"


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Returns an empty dict for empty or missing headers.
    """
    if not header:
        return {}
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        pair = pair.strip()
        if "=" in pair:
            key, _, value = pair.partition("=")
            cookies[key.strip()] = value.strip()
    return cookies


class CookieExpiry(Enum):
    """How the browser should expire a cookie."""

    RELATIVE = "relative"  # now + N seconds
    SESSION = "session"  # end of the browser session (no Expires)
    PERSISTENT = "persistent"  # far future
    DELETED = "deleted"  # in the past, so the browser drops it


class Cookie:
    """A cookie to be sent to the browser via ``Set-Cookie``.

    Build one with a named constructor; the expiry kind is fixed from
    then on. ``path``, ``domain``, ``secure`` and ``http_only`` stay
    settable::

        cookie = Cookie.persistent("theme", "dark")
        cookie.path = "/"
        cookie.http_only = True
        ctx.set_cookie(cookie)
    """

    __slots__ = ("_expiry", "_name", "_seconds", "_value", "domain", "http_only", "path", "secure")

    def __init__(self, name: str, value: str, expiry: CookieExpiry, seconds: int = 0) -> None:
        if not name:
            msg = "Cookie name must not be empty."
            raise InvalidArgument(msg)
        self._name = name
        self._value = value
        self._expiry = expiry
        self._seconds = seconds
        self.path = ""
        self.domain = ""
        self.secure = False
        self.http_only = False

    # -- Constructors --

    @classmethod
    def relative(cls, name: str, value: str, seconds: int) -> "Cookie":
        """A cookie that expires ``seconds`` from the time it is rendered."""
        if seconds < 0:
            msg = f"Cookie expiry cannot be negative (got {seconds})."
            raise InvalidArgument(msg)
        return cls(name, value, CookieExpiry.RELATIVE, seconds)

    @classmethod
    def session_scoped(cls, name: str, value: str) -> "Cookie":
        """A cookie that lives until the browser session ends."""
        return cls(name, value, CookieExpiry.SESSION)

    @classmethod
    def persistent(cls, name: str, value: str) -> "Cookie":
        """A cookie that effectively never expires."""
        return cls(name, value, CookieExpiry.PERSISTENT)

    @classmethod
    def expired(cls, name: str) -> "Cookie":
        """A cookie that makes the browser delete ``name`` immediately."""
        return cls(name, DELETED_VALUE, CookieExpiry.DELETED)

    # -- Read-only attributes --

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> str:
        return self._value

    @property
    def expiry(self) -> CookieExpiry:
        return self._expiry

    @property
    def seconds(self) -> int:
        """Offset for ``RELATIVE`` cookies, 0 otherwise."""
        return self._seconds

    # -- Rendering --

    def expires_at(self, now: float | None = None) -> int | None:
        """Epoch for the ``Expires`` attribute, or None to omit it."""
        match self._expiry:
            case CookieExpiry.PERSISTENT:
                return FAR_FUTURE_EPOCH
            case CookieExpiry.SESSION:
                return None
            case CookieExpiry.DELETED:
                return 0
            case CookieExpiry.RELATIVE:
                current = int(time.time() if now is None else now)
                return current + self._seconds

    def marshal(self, now: float | None = None) -> str:
        """Render as a ``Set-Cookie`` header value.

        ``now`` overrides the clock for relative cookies.
        """
        parts = [f"{self._name}={self._value}"]
        expires = self.expires_at(now)
        if expires is not None:
            parts.append(f"Expires={http_date(expires)}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.secure:
            parts.append("Secure")
        if self.http_only:
            parts.append("HttpOnly")
        return "; ".join(parts)

    def __repr__(self) -> str:
        return f"Cookie({self._name!r}, {self._value!r}, {self._expiry.name})"
