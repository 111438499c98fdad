"""Signed cookie sessions.

Session data lives entirely in the client's cookie store. A token is::

    base64(json(data)) | unix-timestamp | hex(HMAC-SHA1(key, payload + timestamp))

The HMAC is the only defence against tampering, and the timestamp plus
the session TTL make the token expire on its own without server state.

Decoding checks the signature before it trusts anything else in the
token: an attacker-controlled timestamp or payload is never parsed
unless it carries a valid signature.

Usage::

    token = encode_session(session, key)
    restored = decode_session(token, key, ttl=3600)

Handlers normally go through ``ctx.session()`` instead, which loads the
cookie lazily and re-signs it when the context replies.
"""

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Any, TypeAlias

from wren.config import DEFAULT_SESSION_TTL
from wren.errors import (
    InvalidSignature,
    MalformedPayload,
    MalformedToken,
    SessionExpired,
    SigningKeyMissing,
)

SEPARATOR = "|"

SessionValue: TypeAlias = (
    str | int | float | bool | None | list["SessionValue"] | dict[str, "SessionValue"]
)


def _is_session_value(value: Any) -> bool:
    """True if *value* survives a JSON round trip unchanged in kind."""
    if value is None or isinstance(value, str | int | float | bool):
        return True
    if isinstance(value, list):
        return all(_is_session_value(item) for item in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and _is_session_value(v) for k, v in value.items())
    return False


class Session:
    """Client-held key-value store for one request.

    Values are JSON-like: strings, numbers, booleans, None, lists and
    string-keyed dicts. ``set``, ``delete`` and ``clear`` mark the session
    dirty so the context knows it must re-sign it.
    """

    __slots__ = ("_data", "dirty", "loaded", "ttl")

    def __init__(self, ttl: int = DEFAULT_SESSION_TTL) -> None:
        self._data: dict[str, SessionValue] = {}
        self.ttl = ttl
        self.dirty = False
        # True once the data came from a verified token
        self.loaded = False

    @classmethod
    def create(cls, ttl: int = DEFAULT_SESSION_TTL) -> "Session":
        """Return a fresh, empty session."""
        return cls(ttl)

    def get(self, key: str, default: SessionValue = None) -> SessionValue:
        """Return the value stored under *key*, or *default*."""
        return self._data.get(key, default)

    def set(self, key: str, value: SessionValue) -> None:
        """Store *value* under *key*.

        Raises ``TypeError`` for values that cannot be carried in the token.
        """
        if not _is_session_value(value):
            msg = f"Session values must be JSON-like, got {type(value).__name__} for {key!r}."
            raise TypeError(msg)
        self._data[key] = value
        self.dirty = True

    def delete(self, key: str) -> None:
        """Remove *key*; missing keys are ignored."""
        self._data.pop(key, None)
        self.dirty = True

    def clear(self) -> None:
        """Drop every key. The next reply carries an empty session."""
        self._data.clear()
        self.dirty = True

    def to_dict(self) -> dict[str, SessionValue]:
        """Return a shallow copy of the session data."""
        return dict(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"<Session {self._data!r} ttl={self.ttl} dirty={self.dirty}>"


# -- Codec --


def _sign(key: str, payload: str, timestamp: str) -> str:
    mac = hmac.new(key.encode("utf-8"), digestmod=hashlib.sha1)
    mac.update(payload.encode("ascii"))
    mac.update(timestamp.encode("ascii"))
    return mac.hexdigest()


def _now(now: float | None) -> int:
    return int(time.time() if now is None else now)


def encode_session(session: Session, key: str, *, now: float | None = None) -> str:
    """Sign and serialize *session* for a ``Set-Cookie`` value.

    Returns ``""`` when the session came from a valid token and nothing
    changed since: the client's cookie is still good.

    Raises ``SigningKeyMissing`` if *key* is empty.
    """
    if not key:
        raise SigningKeyMissing
    if session.loaded and not session.dirty:
        return ""
    document = json.dumps(session.to_dict(), sort_keys=True, separators=(",", ":"))
    payload = base64.b64encode(document.encode("utf-8")).decode("ascii")
    timestamp = str(_now(now))
    signature = _sign(key, payload, timestamp)
    return SEPARATOR.join((payload, timestamp, signature))


def decode_session(
    token: str,
    key: str,
    *,
    ttl: int = DEFAULT_SESSION_TTL,
    now: float | None = None,
) -> Session:
    """Verify *token* and rebuild the session it carries.

    Raises:
        SigningKeyMissing: *key* is empty.
        MalformedToken: the token is not ``payload|timestamp|signature``,
            or its signed timestamp is not an integer.
        InvalidSignature: the signature does not match.
        SessionExpired: the token is older than *ttl* seconds.
        MalformedPayload: the payload is not base64 JSON object data.
    """
    if not key:
        raise SigningKeyMissing
    pieces = token.split(SEPARATOR)
    if len(pieces) != 3:
        raise MalformedToken
    payload, timestamp, signature = pieces

    try:
        expected = _sign(key, payload, timestamp)
    except UnicodeEncodeError:
        raise InvalidSignature from None
    if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8")):
        raise InvalidSignature

    try:
        issued = int(timestamp, 10)
    except ValueError:
        raise MalformedToken from None
    if _now(now) - ttl > issued:
        raise SessionExpired

    try:
        raw = base64.b64decode(payload, validate=True)
        data = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise MalformedPayload from exc
    if not isinstance(data, dict):
        raise MalformedPayload

    session = Session(ttl)
    session._data = data
    session.loaded = True
    return session
