"""Wren application class.

Mutable during setup (route registration, lifecycle hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import threading

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren._internal.types import Handler, Hook, RouteDecorator
from wren.config import AppConfig
from wren.routing.route import Route
from wren.routing.router import Router
from wren.server.handler import handle_request


class App:
    """The wren application.

    Register handlers for regex path patterns, then serve the app with
    ``app.run()`` or any ASGI server::

        app = App(AppConfig(secret_key="s3cr3t"))

        @app.get(r"/items/(\\d+)")
        def show_item(ctx, args):
            ctx.ok(f"<p>item {args[0]}</p>")

        app.post(r"/items", create_item)

    Handlers receive the RequestContext and the tuple of captured groups.
    Routes are tried in registration order; the first match wins.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread freezes the route table, even when several workers call
        ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
        "router",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self.router: Router = Router()
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Route registration --

    def route(
        self,
        pattern: str,
        method: str = "GET",
        handler: Handler | None = None,
    ) -> RouteDecorator | Route:
        """Register *handler* for *method* requests whose path matches *pattern*.

        Without *handler*, returns a decorator. Raises
        ``ConfigurationError`` right away if *pattern* does not compile.
        """
        if handler is not None:
            self._check_not_frozen()
            return self.router.add(pattern, method, handler)

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self.router.add(pattern, method, func)
            return func

        return decorator

    def get(self, pattern: str, handler: Handler | None = None) -> RouteDecorator | Route:
        """Register a GET route. It also serves HEAD requests."""
        return self.route(pattern, "GET", handler)

    def post(self, pattern: str, handler: Handler | None = None) -> RouteDecorator | Route:
        """Register a POST route."""
        return self.route(pattern, "POST", handler)

    def put(self, pattern: str, handler: Handler | None = None) -> RouteDecorator | Route:
        """Register a PUT route."""
        return self.route(pattern, "PUT", handler)

    def delete(self, pattern: str, handler: Handler | None = None) -> RouteDecorator | Route:
        """Register a DELETE route."""
        return self.route(pattern, "DELETE", handler)

    # -- Lifecycle hooks --

    def on_startup(self, func: Hook) -> Hook:
        """Register a sync or async function to run at ASGI lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Register a sync or async function to run at ASGI lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with pounce until interrupted."""
        from wren.server.dev import run_server

        self._ensure_frozen()
        run_server(self, host or self.config.host, port or self.config.port)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler pipeline. Other scope types are ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        await handle_request(scope, receive, send, app=self)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self._run_hooks(self._startup_hooks)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self._run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def _run_hooks(self, hooks: list[Hook]) -> None:
        for hook in hooks:
            await invoke(hook)

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self.router.compile()
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
