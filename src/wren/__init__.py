"""Wren — a small ASGI web framework with signed cookie sessions.

Routes are regular expressions tried in registration order. Handlers
get a RequestContext and the captured groups, and reply exactly once.
Sessions travel in an HMAC-signed, self-expiring cookie.

Basic usage::

    from wren import App, AppConfig

    app = App(AppConfig(secret_key="s3cr3t"))

    @app.get(r"/hello/(\\w+)")
    def hello(ctx, args):
        visits = ctx.session().get("visits", 0) + 1
        ctx.session().set("visits", visits)
        ctx.ok(f"<p>Hello {args[0]}, visit #{visits}</p>")

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Cookie",
    "HandlerFault",
    "Request",
    "RequestContext",
    "Session",
    "SessionError",
    "WrenError",
    "get_context",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Cookie":
        from wren.http.cookies import Cookie

        return Cookie

    if name in ("RequestContext", "get_context"):
        from wren import context as _ctx

        return getattr(_ctx, name)

    if name == "Session":
        from wren.sessions import Session

        return Session

    if name in ("ConfigurationError", "HandlerFault", "SessionError", "WrenError"):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
