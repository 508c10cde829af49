"""
Route and mount entries: the immutable records a Router keeps.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..handlers import Handler
from .pattern import PathPattern


@dataclass(frozen=True)
class RouteEntry:
    """
    One registered method + template + handler chain.

    `handlers` is the complete chain stored at registration: the handlers
    of applicable mounts first (in mount order), then the route's own.
    """

    method: str
    pattern: PathPattern
    handlers: Tuple[Handler, ...]

    @property
    def path(self) -> str:
        return self.pattern.template

    def match(self, path: str) -> Optional[Dict[str, str]]:
        return self.pattern.match(path)


@dataclass(frozen=True)
class MountEntry:
    """
    A handler mounted under a path prefix.

    By default the prefix test is a raw string prefix: a mount on "/us"
    also applies to "/user/5". With `segment_aware` the prefix has to end
    on a segment boundary ("/api" applies to "/api" and "/api/x", not
    "/apix").
    """

    prefix: str
    handler: Handler
    segment_aware: bool = False

    def matches(self, path: str) -> bool:
        if not self.segment_aware:
            return path.startswith(self.prefix)

        base = self.prefix.rstrip("/")
        if not base:
            return True  # "/" covers every path
        return path == base or path.startswith(base + "/")
