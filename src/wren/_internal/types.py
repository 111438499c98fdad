"""Shared type aliases used across wren modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from wren.context import RequestContext

# Route handler: receives the request context and the captured groups
Handler: TypeAlias = Callable[["RequestContext", tuple[str, ...]], Awaitable[Any] | Any]

# Startup / shutdown hook, sync or async, no arguments
Hook: TypeAlias = Callable[[], Any]

# What App.route() and the verb helpers return when used as decorators
RouteDecorator: TypeAlias = Callable[[Handler], Handler]
