"""ASGI handler — translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly. Converts the scope
to a Request, wraps it in a RequestContext, dispatches through the
router and flushes the committed response through ASGI send().
"""

from __future__ import annotations

import logging
from contextvars import Token
from typing import TYPE_CHECKING

from wren._internal.asgi import Receive, Scope, Send
from wren.context import RequestContext, current_context
from wren.http.request import Request
from wren.server.errors import protect, reply_internal_error

if TYPE_CHECKING:
    from wren.app import App

logger = logging.getLogger("wren.server")

NOT_FOUND_BODY = "<h1>Not found</h1>"


async def handle_request(scope: Scope, receive: Receive, send: Send, *, app: App) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    ctx = RequestContext(request, send, app)
    token: Token[RequestContext] = current_context.set(ctx)

    try:
        await dispatch(ctx)
    finally:
        current_context.reset(token)

    await ctx.flush()
    if app.config.log_hits:
        ctx.log_hit()


async def dispatch(ctx: RequestContext) -> None:
    """Match *ctx*'s request to a route and run its handler.

    Leaves *ctx* replied: by the handler, by the fault boundary (500),
    by the not-found fallback (404), or with its current status when the
    handler returned without replying.
    """
    request = ctx.request
    match = ctx.app.router.match(request.method, request.path)

    if match is None:
        logger.debug("404 %s %s", request.method, request.url)
        ctx.not_found(NOT_FOUND_BODY)
        return

    fault = await protect(match.route.handler, ctx, match.args)
    if fault is not None:
        reply_internal_error(ctx, fault)
    elif not ctx.replied:
        ctx.reply(ctx.status)
