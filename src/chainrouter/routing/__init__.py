"""
Routing: template compilation, route/mount entries and the Router.
"""

from .entries import MountEntry, RouteEntry
from .pattern import PathPattern, compile_pattern
from .router import METHODS, Router

__all__ = [
    "METHODS",
    "MountEntry",
    "PathPattern",
    "RouteEntry",
    "Router",
    "compile_pattern",
]
