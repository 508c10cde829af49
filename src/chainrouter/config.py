"""
=============================================================================
ROUTER CONFIGURATION
=============================================================================

Centralized configuration for a Router instance.

Like any dataclass config it is typed, has sensible defaults, can be read
from the environment, and is validated eagerly when the Router is built:

    router = Router()                              # defaults
    router = Router(RouterConfig(mount_resolution="request"))
    router = Router(RouterConfig.from_env())       # ROUTER_* variables

=============================================================================
MOUNT RESOLUTION
=============================================================================

    "registration" (default)
        Mounted handlers are resolved once, when a route is registered,
        against the route's own template. Mounts added after a route do
        NOT apply to it, so mount generic handlers first:

            router.mount("/", logger)          # applies to both routes
            router.get("/", index)
            router.get("/api", api)
            router.mount("/api", auth)         # applies to neither!

    "request"
        Mounted handlers are resolved for every request against the
        request path. Registration order between mounts and routes no
        longer matters, at the cost of one prefix scan per request.

=============================================================================
"""

from dataclasses import dataclass
import logging
import os


MOUNT_RESOLUTIONS = ("registration", "request")
LOG_FORMATS = ("text", "json")


@dataclass
class RouterConfig:
    """
    Configuration for a Router.

    ROUTING
    - mount_resolution, segment_aware_mounts

    LOGGING
    - log_level, log_format
    """

    # ─────────────────────────────────────────────────────────────────────
    # ROUTING
    # ─────────────────────────────────────────────────────────────────────

    mount_resolution: str = "registration"
    """When mounted handlers are attached: "registration" or "request"."""

    segment_aware_mounts: bool = False
    """
    False: mount prefixes are raw string prefixes ("/us" applies to "/user").
    True:  prefixes must end on a "/" segment boundary.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG shows every registration and dispatch decision."""

    log_format: str = "text"
    """Access log format for RequestLogger: 'text' or 'json'."""

    @classmethod
    def from_env(cls) -> "RouterConfig":
        """
        Create configuration from environment variables.

            ROUTER_MOUNT_RESOLUTION       registration | request
            ROUTER_SEGMENT_AWARE_MOUNTS   1/true/yes to enable
            ROUTER_LOG_LEVEL              DEBUG, INFO, ...
            ROUTER_LOG_FORMAT             text | json
        """
        return cls(
            mount_resolution=os.getenv("ROUTER_MOUNT_RESOLUTION", "registration").lower(),
            segment_aware_mounts=os.getenv("ROUTER_SEGMENT_AWARE_MOUNTS", "").lower()
            in ("1", "true", "yes", "on"),
            log_level=os.getenv("ROUTER_LOG_LEVEL", "INFO"),
            log_format=os.getenv("ROUTER_LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> None:
        """Raise ValueError on the first invalid setting."""
        if self.mount_resolution not in MOUNT_RESOLUTIONS:
            raise ValueError(
                f"Invalid mount_resolution: {self.mount_resolution!r}. "
                f"Must be one of {', '.join(MOUNT_RESOLUTIONS)}."
            )

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log_level: {self.log_level!r}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be 'text' or 'json', got {self.log_format!r}")


def setup_logging(config: RouterConfig) -> None:
    """
    Configure logging for an application built on chainrouter.

    Sets up the root logger once (basicConfig is a no-op if handlers are
    already installed) and applies the configured level to the
    "chainrouter" logger hierarchy.
    """
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("chainrouter").setLevel(level)
