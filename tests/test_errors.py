"""Tests for wren.errors and the fault boundary in wren.server.errors."""

from typing import Any

import pytest

from wren.app import App
from wren.config import AppConfig
from wren.context import RequestContext
from wren.errors import (
    ConfigurationError,
    DoubleReply,
    HandlerFault,
    InvalidArgument,
    SessionError,
    SessionExpired,
    WrenError,
)
from wren.http.request import Request
from wren.server.errors import INTERNAL_ERROR_BODY, protect, reply_internal_error


def _ctx() -> RequestContext:
    scope = {"type": "http", "method": "GET", "path": "/p", "headers": []}

    async def receive() -> dict[str, Any]:
        return {"type": "http.disconnect"}

    async def send(message: dict[str, Any]) -> None:
        pass

    return RequestContext(Request.from_asgi(scope, receive), send, App(AppConfig()))


class TestHierarchy:
    def test_everything_is_a_wren_error(self) -> None:
        for exc_type in (ConfigurationError, InvalidArgument, DoubleReply, SessionError):
            assert issubclass(exc_type, WrenError)

    def test_invalid_argument_is_value_error(self) -> None:
        assert issubclass(InvalidArgument, ValueError)

    def test_session_errors_have_default_messages(self) -> None:
        assert str(SessionExpired()) == "Session has expired"
        assert str(SessionExpired("custom")) == "custom"


class TestHandlerFault:
    def test_str(self) -> None:
        fault = HandlerFault(exception=ValueError("x"), traceback="tb")
        assert str(fault) == "handler crashed: ValueError('x')"

    def test_frozen(self) -> None:
        fault = HandlerFault(exception=ValueError("x"), traceback="tb")
        with pytest.raises(AttributeError):
            fault.traceback = "other"  # type: ignore[misc]


class TestProtect:
    async def test_clean_handler_returns_none(self) -> None:
        ctx = _ctx()
        assert await protect(lambda c, a: c.ok(), ctx, ()) is None
        assert ctx.replied

    async def test_args_passed_through(self) -> None:
        seen: list[tuple[str, ...]] = []
        await protect(lambda c, a: seen.append(a), _ctx(), ("1", "two"))
        assert seen == [("1", "two")]

    async def test_sync_raise_captured(self, caplog: pytest.LogCaptureFixture) -> None:
        def crash(ctx, args):
            raise LookupError("gone")

        with caplog.at_level("ERROR", logger="wren.server"):
            fault = await protect(crash, _ctx(), ())
        assert isinstance(fault, HandlerFault)
        assert isinstance(fault.exception, LookupError)
        assert "LookupError: gone" in fault.traceback
        assert "handler crashed: 500 GET /p" in caplog.text

    async def test_async_raise_captured(self) -> None:
        async def crash(ctx, args):
            raise RuntimeError("async")

        fault = await protect(crash, _ctx(), ())
        assert isinstance(fault.exception, RuntimeError)


class TestReplyInternalError:
    def test_generic_500(self) -> None:
        ctx = _ctx()
        reply_internal_error(ctx, HandlerFault(ValueError("secret detail"), "tb"))
        assert ctx.status == 500
        assert ctx.content_length == len(INTERNAL_ERROR_BODY)

    def test_existing_reply_kept(self, caplog: pytest.LogCaptureFixture) -> None:
        ctx = _ctx()
        ctx.ok("done")
        with caplog.at_level("ERROR", logger="wren.server"):
            reply_internal_error(ctx, HandlerFault(ValueError("late"), "tb"))
        assert ctx.status == 200
        assert "already been replied to" not in caplog.text
        assert "status 200 kept" in caplog.text
