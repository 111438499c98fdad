"""Failure isolation for route handlers.

Every handler runs inside ``protect()``. Whatever it raises is logged
with its traceback and handed back as a ``HandlerFault`` value, so a
crashing handler costs one 500 response and nothing more.
"""

import logging
import traceback

from wren._internal.invoke import invoke
from wren._internal.types import Handler
from wren.context import DEFAULT_CONTENT_TYPE, RequestContext
from wren.errors import HandlerFault

logger = logging.getLogger("wren.server")

INTERNAL_ERROR_BODY = "Internal server error"


async def protect(
    handler: Handler,
    ctx: RequestContext,
    args: tuple[str, ...],
) -> HandlerFault | None:
    """Run *handler* for *ctx*; return a HandlerFault if it raised."""
    try:
        await invoke(handler, ctx, args)
    except Exception as exc:
        logger.exception(
            "handler crashed: 500 %s %s", ctx.request.method, ctx.request.url
        )
        return HandlerFault(exception=exc, traceback=traceback.format_exc())
    return None


def reply_internal_error(ctx: RequestContext, fault: HandlerFault) -> None:
    """Turn *fault* into a generic 500 unless the handler already replied."""
    if ctx.replied:
        logger.error(
            "%s after the response was committed (status %d kept)", fault, ctx.status
        )
        return
    # A 500 always goes out with the default content type
    ctx.content_type = DEFAULT_CONTENT_TYPE
    ctx.reply(500, INTERNAL_ERROR_BODY)
