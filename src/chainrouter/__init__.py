"""
=============================================================================
CHAINROUTER - HTTP Request Router With Handler Chains
=============================================================================

Maps (method, path) to an ordered chain of handlers. Handlers pass control
explicitly, share data through a request-scoped store, and can abort the
chain with an error response.

=============================================================================
QUICK START
=============================================================================

    from chainrouter import Router, RequestLogger

    router = Router()
    router.mount("/", RequestLogger(router))

    def load_user(res, req):
        ctx = router.context(req)
        if ctx.params["userid"] == "0":
            ctx.fail(res, req, "no such user", 404)
            return
        ctx.set("user", {"id": ctx.params["userid"]})
        ctx.next(res, req)

    def show_user(res, req):
        user, _ = router.context(req).get("user")
        res.write("user detail " + user["id"])

    router.get("/user/:userid/hello", load_user, show_user)

    # Router is a WSGI application
    from wsgiref.simple_server import make_server
    make_server("", 3000, router).serve_forever()

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    chainrouter/
    ├── __init__.py          # This file - package exports
    ├── config.py            # RouterConfig dataclass, setup_logging()
    ├── errors.py            # Exception hierarchy
    ├── handlers.py          # Handler types, default responders
    ├── context.py           # RequestContext, ContextRegistry
    ├── routing/
    │   ├── pattern.py       # ":param" template compiler
    │   ├── entries.py       # RouteEntry, MountEntry
    │   └── router.py        # Router (registration, dispatch, WSGI)
    ├── http/
    │   ├── request.py       # HTTPRequest
    │   ├── response.py      # ResponseWriter, HTTPResponse
    │   └── status_codes.py  # HTTPStatus
    └── middleware/
        ├── base.py          # Middleware base class
        └── logging.py       # RequestLogger

=============================================================================
"""

from .config import RouterConfig, setup_logging
from .context import ContextRegistry, RequestContext
from .errors import (
    ContextNotFoundError,
    PatternError,
    RegistrationError,
    RouterError,
)
from .handlers import (
    NOT_FOUND_MESSAGE,
    ErrorHandler,
    Handler,
    default_error_handler,
    default_not_found_handler,
    http_error,
)
from .http import HTTPRequest, HTTPResponse, HTTPStatus, ResponseWriter
from .middleware import Middleware, RequestLogger
from .routing import METHODS, MountEntry, PathPattern, RouteEntry, Router, compile_pattern

__version__ = "1.0.0"

__all__ = [
    # Routing
    "Router",
    "RouteEntry",
    "MountEntry",
    "PathPattern",
    "compile_pattern",
    "METHODS",
    # Context
    "RequestContext",
    "ContextRegistry",
    # Handlers
    "Handler",
    "ErrorHandler",
    "default_error_handler",
    "default_not_found_handler",
    "http_error",
    "NOT_FOUND_MESSAGE",
    # HTTP
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "ResponseWriter",
    # Middleware
    "Middleware",
    "RequestLogger",
    # Config
    "RouterConfig",
    "setup_logging",
    # Errors
    "RouterError",
    "RegistrationError",
    "PatternError",
    "ContextNotFoundError",
]
