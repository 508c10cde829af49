"""
=============================================================================
ROUTER
=============================================================================

Maps an incoming request (method + path) to an ordered chain of handlers
and runs that chain.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        DISPATCH FLOW                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Incoming Request: GET /user/14/hello                              │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ROUTER                                                      │   │
    │   │                                                              │   │
    │   │  Mounts (registration order):                                │   │
    │   │    /     → logger                                            │   │
    │   │                                                              │   │
    │   │  routes["GET"] (registration order, first match wins):       │   │
    │   │    /                    → [logger, index]                    │   │
    │   │    /user/:userid/hello  → [logger, load_user, show_user] ◄── │   │
    │   │                                                              │   │
    │   │  params = {"userid": "14"}                                   │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   RequestContext(handlers=[logger, load_user, show_user], ...)      │
    │   ctx.next(res, req)  →  logger → load_user → show_user            │
    │        │                                                             │
    │        ▼                                                             │
    │   context discarded (always, even if a handler raised)              │
    │                                                                      │
    │   No match / unknown method → not-found responder                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
MOUNTS
=============================================================================

    router.mount("/", logger)
    router.mount("/api", auth)
    router.get("/", index)             # chain: [logger, index]
    router.get("/api", list_items)     # chain: [logger, auth, list_items]

By default mounted handlers are attached when a route is registered,
matched against the route's template. Mount first, then register routes.
See RouterConfig.mount_resolution for the per-request alternative.

=============================================================================
INTERVIEW QUESTIONS ABOUT THIS DESIGN
=============================================================================

Q: "Why resolve mounts at registration time?"
A: "The prefix scan happens once per route instead of once per request,
   and every route's chain is fixed and inspectable. The price is an
   ordering contract: mounts added later don't apply retroactively."

Q: "How do handlers find their context under concurrency?"
A: "The router keeps a lock-protected map from request identity to
   context. Each request's entry is added right before the chain starts
   and removed in a finally block, so nothing leaks when a handler raises."

Q: "What happens on conflicting routes?"
A: "First registered wins. /users/me must be registered before
   /users/:id if it should take precedence."

=============================================================================
"""

from typing import Dict, List, Optional
import logging

from ..config import RouterConfig
from ..context import ContextRegistry, RequestContext
from ..errors import RegistrationError
from ..handlers import ErrorHandler, Handler, default_error_handler, default_not_found_handler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseWriter
from ..http.status_codes import HTTPStatus
from .entries import MountEntry, RouteEntry
from .pattern import compile_pattern


logger = logging.getLogger(__name__)


METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")


class Router:
    """
    HTTP request router with handler chains and mounted handlers.

    ==========================================================================
    USAGE
    ==========================================================================

        router = Router()

        router.mount("/", request_logger)

        # Several handlers per route, run in order
        router.get("/user/:userid/hello", load_user, show_user)

        # Or as a decorator
        @router.post("/user")
        def create_user(res, req):
            ...

        # Custom responders
        router.not_found_handler = my_not_found
        router.error_handler = my_error_page

        # Serve with any WSGI server
        from wsgiref.simple_server import make_server
        make_server("", 3000, router).serve_forever()

    ==========================================================================
    """

    def __init__(self, config: Optional[RouterConfig] = None):
        """
        Args:
            config: Router configuration. Validated immediately.
        """
        self.config = config or RouterConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._routes: Dict[str, List[RouteEntry]] = {method: [] for method in METHODS}
        self._mounts: List[MountEntry] = []
        self._contexts = ContextRegistry()

        # None → default responders
        self.not_found_handler: Optional[Handler] = None
        self.error_handler: Optional[ErrorHandler] = None

    @property
    def resolves_mounts_per_request(self) -> bool:
        return self.config.mount_resolution == "request"

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def mount(self, prefix: str, handler: Handler) -> MountEntry:
        """
        Mount a handler for every route whose path starts with `prefix`.

        Mounts apply to routes registered AFTER this call (unless mounts
        are resolved per request).

        Raises:
            RegistrationError: prefix does not start with "/" or handler is
                not callable.
        """
        if not isinstance(prefix, str) or not prefix.startswith("/"):
            raise RegistrationError(f"Mount prefix must start with '/': {prefix!r}")
        _check_handlers((handler,))

        entry = MountEntry(
            prefix=prefix,
            handler=handler,
            segment_aware=self.config.segment_aware_mounts,
        )
        self._mounts.append(entry)
        logger.debug(f"Mounted {_name(handler)} on {prefix}")
        return entry

    def add_route(self, method: str, path: str, *handlers: Handler) -> RouteEntry:
        """
        Register a handler chain for a method and path template.

        This is the core registration method; get(), post(), etc. are
        wrappers around it.

        Raises:
            RegistrationError: unknown method, no handlers, or a handler
                that is not callable.
            PatternError: malformed path template.
        """
        method = method.upper() if isinstance(method, str) else method
        if method not in self._routes:
            raise RegistrationError(
                f"Unsupported method {method!r}, expected one of {', '.join(METHODS)}"
            )
        if not handlers:
            raise RegistrationError(f"No handlers given for {method} {path}")
        _check_handlers(handlers)

        # Compile once; fails fast on a bad template
        pattern = compile_pattern(path)

        if self.resolves_mounts_per_request:
            chain = tuple(handlers)
        else:
            # Resolve against the template, not a runtime path
            mounted = tuple(m.handler for m in self._mounts if m.matches(path))
            chain = mounted + tuple(handlers)

        entry = RouteEntry(method=method, pattern=pattern, handlers=chain)
        self._routes[method].append(entry)

        logger.debug(f"Registered {method} {path} ({len(chain)} handlers)")
        return entry

    def route(self, method: str, path: str, *handlers: Handler):
        """
        Register a route, or return a decorator when no handlers are given.

            router.route("GET", "/users", auth, list_users)

            @router.route("GET", "/users")
            def list_users(res, req): ...

        The decorator returns the function unchanged.
        """
        if handlers:
            return self.add_route(method, path, *handlers)

        def decorator(handler: Handler) -> Handler:
            self.add_route(method, path, handler)
            return handler

        return decorator

    def get(self, path: str, *handlers: Handler):
        """Register a GET route."""
        return self.route("GET", path, *handlers)

    def post(self, path: str, *handlers: Handler):
        """Register a POST route."""
        return self.route("POST", path, *handlers)

    def put(self, path: str, *handlers: Handler):
        """Register a PUT route."""
        return self.route("PUT", path, *handlers)

    def delete(self, path: str, *handlers: Handler):
        """Register a DELETE route."""
        return self.route("DELETE", path, *handlers)

    def patch(self, path: str, *handlers: Handler):
        """Register a PATCH route."""
        return self.route("PATCH", path, *handlers)

    def head(self, path: str, *handlers: Handler):
        """Register a HEAD route."""
        return self.route("HEAD", path, *handlers)

    def options(self, path: str, *handlers: Handler):
        """Register an OPTIONS route."""
        return self.route("OPTIONS", path, *handlers)

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def routes(self) -> List[RouteEntry]:
        """All registered routes, grouped by method in registration order."""
        return [entry for method in METHODS for entry in self._routes[method]]

    def mounts(self) -> List[MountEntry]:
        return list(self._mounts)

    def print_routes(self) -> None:
        """Print all registered routes (for debugging)."""
        print("\nRegistered Routes:")
        print("-" * 60)
        for entry in self.routes():
            chain = ", ".join(_name(h) for h in entry.handlers)
            print(f"  {entry.method:8} {entry.path:30} → {chain}")
        print("-" * 60)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def context(self, req: HTTPRequest) -> RequestContext:
        """
        Return the context of a request currently being dispatched.

        Raises:
            ContextNotFoundError: `req` is not in flight on this router
                (never dispatched, or its chain already returned).
        """
        return self._contexts.lookup(req)

    def _find_route(self, method: str, path: str):
        """First route for `method` whose pattern matches `path`."""
        for entry in self._routes.get(method, ()):
            params = entry.match(path)
            if params is not None:
                return entry, params
        return None, None

    def serve(self, res: ResponseWriter, req: HTTPRequest) -> None:
        """
        Dispatch one request: run the first matching route's chain, or the
        not-found responder.

        Exceptions raised by handlers propagate to the caller; the request's
        context is discarded either way.
        """
        entry, params = self._find_route(req.method, req.path)

        if entry is None:
            logger.debug(f"No route for {req.method} {req.path}")
            (self.not_found_handler or default_not_found_handler)(res, req)
            return

        handlers = entry.handlers
        if self.resolves_mounts_per_request:
            mounted = tuple(m.handler for m in self._mounts if m.matches(req.path))
            handlers = mounted + handlers

        req.path_params = params
        ctx = RequestContext(
            handlers,
            params=params,
            error_handler=self.error_handler or default_error_handler,
        )

        logger.debug(f"{req.method} {req.path} → {entry.path} {params}")

        with self._contexts.bind(req, ctx):
            ctx.next(res, req)

    def handle(self, req: HTTPRequest) -> HTTPResponse:
        """
        Dispatch a request and collect the result as an HTTPResponse.

        An exception escaping the chain is logged and turned into a plain
        500 response.
        """
        res = ResponseWriter()
        try:
            self.serve(res, req)
        except Exception:
            logger.exception(f"Unhandled error in {req.method} {req.path}")
            return HTTPResponse(
                status=HTTPStatus.INTERNAL_SERVER_ERROR,
                headers={"Content-Type": "text/plain; charset=utf-8"},
                body=b"Internal Server Error",
            )
        return res.to_response()

    def __call__(self, environ, start_response):
        """WSGI entry point."""
        req = HTTPRequest.from_environ(environ)
        response = self.handle(req)

        start_response(response.wsgi_status, response.wsgi_headers())
        if req.method == "HEAD":
            return [b""]
        return [response.body]


def _check_handlers(handlers) -> None:
    for handler in handlers:
        if not callable(handler):
            raise RegistrationError(f"Handler is not callable: {handler!r}")


def _name(handler) -> str:
    return getattr(handler, "__name__", type(handler).__name__)
