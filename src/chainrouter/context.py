"""
=============================================================================
REQUEST CONTEXT
=============================================================================

The per-request state that drives a handler chain.

A RequestContext is created by the router for every matched request and
thrown away when the chain returns. It owns:

    handlers    The ordered chain: mounted handlers first, then the
                route's own handlers.
    cursor      Index of the next handler to run. Only ever grows.
    params      Path parameters extracted from the matched route.
    aborted     Set by fail(); once set, next() never runs anything again.
    store       Request-scoped scratch space for handlers to pass data
                down the chain. Created on first use.

=============================================================================
CHAIN EXECUTION (the "onion")
=============================================================================

next() is a plain synchronous call. A handler that calls next() gets
control back once every downstream handler has returned, so code after
its next() call runs on the way out:

    logger(res, req):                        ┐
        start = time.time()                  │ before
        ctx.next(res, req) ─────────────┐    ┘
                                        ▼
            load_user(res, req):              ┐
                ctx.set("user", ...)          │
                ctx.next(res, req) ─────┐     │
                                        ▼     │
                    show_user(res, req):      │
                        res.write(...)        │
                                        ◄─────┘
        print(time.time() - start)  ◄── after ┐ (runs even if a
                                              ┘  downstream handler failed)

The cursor is advanced BEFORE the selected handler is invoked, so a
handler that calls next() reaches the handler after itself, not itself.

=============================================================================
FAILURE
=============================================================================

fail() sets the abort flag and calls the error responder right away. It
does not unwind the stack: the failing handler keeps running until it
returns, so handlers should `return` straight after fail(). What fail()
does guarantee is that no further handler is ever started for this
request.

=============================================================================
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple
import logging
import threading

from .errors import ContextNotFoundError
from .handlers import ErrorHandler, Handler, default_error_handler, noop_handler
from .http.request import HTTPRequest
from .http.response import ResponseWriter


logger = logging.getLogger(__name__)


class RequestContext:
    """
    Chain executor and scratch store for one in-flight request.

    Usage inside a handler:

        def load_user(res, req):
            ctx = router.context(req)
            user = find_user(ctx.params["userid"])
            if user is None:
                ctx.fail(res, req, "no such user", 404)
                return
            ctx.set("user", user)
            ctx.next(res, req)
    """

    def __init__(
        self,
        handlers: Sequence[Handler],
        params: Optional[Dict[str, str]] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.params: Dict[str, str] = dict(params or {})
        self._handlers: Tuple[Handler, ...] = tuple(handlers)
        self._cursor = 0
        self._aborted = False
        self._error_handler = error_handler or default_error_handler
        self._store: Optional[Dict[Any, Any]] = None

    @property
    def aborted(self) -> bool:
        """True once fail() has been called."""
        return self._aborted

    @property
    def cursor(self) -> int:
        """Number of next() calls that selected a handler (including sentinels)."""
        return self._cursor

    # =========================================================================
    # CHAIN CONTROL
    # =========================================================================

    def next(self, res: ResponseWriter, req: HTTPRequest) -> None:
        """
        Invoke the next handler in the chain.

        No-op once the chain is aborted. Past the end of the chain a no-op
        handler runs instead, so a stray next() in the last handler is
        harmless.
        """
        if self._aborted:
            return

        if self._cursor < len(self._handlers):
            handler = self._handlers[self._cursor]
        else:
            handler = noop_handler

        self._cursor += 1
        handler(res, req)

    def fail(self, res: ResponseWriter, req: HTTPRequest, message: str, code: int) -> None:
        """
        Abort the chain and let the error responder write the response.

        Every call invokes the responder; calling fail() twice in one chain
        responds twice.
        """
        self._aborted = True
        logger.debug(f"{req.method} {req.path} aborted with {code}: {message}")
        self._error_handler(res, req, message, code)

    # =========================================================================
    # SCRATCH STORE
    # =========================================================================

    def _ensure_store(self) -> Dict[Any, Any]:
        if self._store is None:
            self._store = {}
        return self._store

    def set(self, key: Any, value: Any) -> bool:
        """
        Store `value` under `key` unless the key is already present.

        Returns:
            True if stored, False if the key existed (old value kept).
        """
        store = self._ensure_store()
        if key in store:
            return False
        store[key] = value
        return True

    def force_set(self, key: Any, value: Any) -> None:
        """Store `value` under `key`, overwriting any previous value."""
        self._ensure_store()[key] = value

    def get(self, key: Any) -> Tuple[Any, bool]:
        """
        Fetch a stored value.

        Returns:
            (value, True) if present, (None, False) otherwise.
        """
        store = self._ensure_store()
        if key in store:
            return store[key], True
        return None, False

    def delete(self, key: Any) -> None:
        """Remove `key`; does nothing if it is absent."""
        self._ensure_store().pop(key, None)

    def clear(self) -> None:
        """Drop the scratch store. Called by the router when the chain ends."""
        self._store = None


class ContextRegistry:
    """
    Maps in-flight requests to their RequestContext.

    Many worker threads dispatch through the same router at once, each
    registering, looking up and removing its own request's context, so the
    mapping is guarded by a lock. Requests are keyed by identity; an entry
    only lives while its request object is held by the dispatching thread.
    """

    def __init__(self):
        self._contexts: Dict[int, RequestContext] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)

    def register(self, req: HTTPRequest, ctx: RequestContext) -> None:
        with self._lock:
            self._contexts[id(req)] = ctx

    def discard(self, req: HTTPRequest) -> None:
        with self._lock:
            ctx = self._contexts.pop(id(req), None)
        if ctx is not None:
            ctx.clear()

    def lookup(self, req: HTTPRequest) -> RequestContext:
        """
        Raises:
            ContextNotFoundError: the request is not being dispatched.
        """
        with self._lock:
            ctx = self._contexts.get(id(req))
        if ctx is None:
            raise ContextNotFoundError(
                f"No request context for {req.method} {req.path}"
            )
        return ctx

    @contextmanager
    def bind(self, req: HTTPRequest, ctx: RequestContext) -> Iterator[RequestContext]:
        """Register `ctx` for the duration of the with-block, then discard it."""
        self.register(req, ctx)
        try:
            yield ctx
        finally:
            self.discard(req)
