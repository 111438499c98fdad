"""Ordered regex router.

Routes are kept in registration order and consulted front to back; the
first route whose method and pattern both match wins. The table is
append-only while the app is set up and read-only once it is compiled.
"""

import logging
import re

from wren._internal.types import Handler
from wren.errors import ConfigurationError
from wren.routing.route import Route, RouteMatch

logger = logging.getLogger("wren.routing")

METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


class Router:
    """Ordered list of regex routes with first-match-wins lookup.

    Usage::

        router = Router()
        router.add(r"/users/(\\d+)", "GET", show_user)
        router.add(r"/users", "POST", create_user)
        router.compile()
        match = router.match("GET", "/users/42")  # match.args == ("42",)

    Patterns are Python regular expressions matched against the whole
    request path.
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._compiled = False

    def add(self, pattern: str, method: str, handler: Handler) -> Route:
        """Compile *pattern* and append a route. Must be called before compile().

        Raises ``ConfigurationError`` if the pattern is not a valid regex
        or the method is not one of GET, POST, PUT, DELETE.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        method = method.upper()
        if method not in METHODS:
            logger.critical("unsupported route method %r for pattern %r", method, pattern)
            msg = f"Unsupported method {method!r} for route {pattern!r}."
            raise ConfigurationError(msg)

        try:
            regex = re.compile(pattern)
        except re.error as exc:
            logger.critical("could not compile route pattern: %r (%s)", pattern, exc)
            msg = f"Could not compile route pattern {pattern!r}: {exc}"
            raise ConfigurationError(msg) from exc

        route = Route(pattern=pattern, method=method, handler=handler, regex=regex)
        self._routes.append(route)
        return route

    @property
    def routes(self) -> tuple[Route, ...]:
        """Return all registered routes in registration order."""
        return tuple(self._routes)

    @property
    def compiled(self) -> bool:
        return self._compiled

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route serving *method* whose pattern matches *path*.

        Returns None when nothing matches.
        """
        for route in self._routes:
            if not route.accepts(method):
                continue
            found = route.regex.fullmatch(path)
            if found is None:
                continue
            return RouteMatch(route=route, args=found.groups(default=""))
        return None

    def __len__(self) -> int:
        return len(self._routes)
