"""Route and RouteMatch frozen dataclasses."""

import re
from dataclasses import dataclass

from wren._internal.types import Handler


@dataclass(frozen=True, slots=True)
class Route:
    """A registered (pattern, method, handler) triple.

    ``regex`` is the compiled ``pattern``. Created by ``Router.add``,
    never modified afterwards.
    """

    pattern: str
    method: str
    handler: Handler
    regex: re.Pattern[str]

    def accepts(self, method: str) -> bool:
        """True if this route serves *method*. GET routes also serve HEAD."""
        return method == self.method or (method == "HEAD" and self.method == "GET")


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``args`` holds the substrings bound by the pattern's groups, left to
    right. Groups that did not take part in the match are ``""``.
    """

    route: Route
    args: tuple[str, ...]
