"""Routing — ordered regex route table, first match wins.

Routes are registered during setup and frozen when the app starts
serving requests.
"""

from wren.routing.route import Route, RouteMatch
from wren.routing.router import Router

__all__ = ["Route", "RouteMatch", "Router"]
