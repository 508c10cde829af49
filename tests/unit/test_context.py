"""
Unit tests for RequestContext and ContextRegistry.
"""

import threading

import pytest

from chainrouter.context import ContextRegistry, RequestContext
from chainrouter.errors import ContextNotFoundError
from chainrouter.http import HTTPRequest, ResponseWriter


@pytest.fixture
def res() -> ResponseWriter:
    return ResponseWriter()


@pytest.fixture
def req() -> HTTPRequest:
    return HTTPRequest(method="GET", path="/")


class TestNext:
    """Tests for chain advancement."""

    def test_runs_handlers_in_order(self, res, req):
        calls = []
        ctx = None

        def first(res, req):
            calls.append("first")
            ctx.next(res, req)

        def second(res, req):
            calls.append("second")

        ctx = RequestContext([first, second])
        ctx.next(res, req)

        assert calls == ["first", "second"]

    def test_handler_that_does_not_call_next_stops_chain(self, res, req):
        calls = []
        ctx = RequestContext([lambda r, q: calls.append(1), lambda r, q: calls.append(2)])

        ctx.next(res, req)

        assert calls == [1]

    def test_cursor_advances_before_invocation(self, res, req):
        cursors = []
        ctx = None

        def handler(res, req):
            cursors.append(ctx.cursor)

        ctx = RequestContext([handler])
        ctx.next(res, req)

        assert cursors == [1]

    def test_next_past_end_is_noop(self, res, req):
        ctx = RequestContext([lambda r, q: None])

        ctx.next(res, req)
        ctx.next(res, req)
        ctx.next(res, req)

        assert ctx.cursor == 3
        assert not res.written

    def test_empty_chain(self, res, req):
        ctx = RequestContext([])

        ctx.next(res, req)

        assert ctx.cursor == 1

    def test_params_are_copied(self):
        params = {"id": "1"}
        ctx = RequestContext([], params=params)
        params["id"] = "2"

        assert ctx.params == {"id": "1"}


class TestFail:
    """Tests for aborting a chain."""

    def test_fail_invokes_error_handler(self, res, req):
        calls = []
        ctx = RequestContext([], error_handler=lambda r, q, m, c: calls.append((m, c)))

        ctx.fail(res, req, "boom", 500)

        assert ctx.aborted
        assert calls == [("boom", 500)]

    def test_next_after_fail_never_runs_handler(self, res, req):
        calls = []
        ctx = RequestContext(
            [lambda r, q: calls.append("ran")],
            error_handler=lambda r, q, m, c: None,
        )

        ctx.fail(res, req, "boom", 500)
        ctx.next(res, req)
        ctx.next(res, req)

        assert calls == []
        assert ctx.cursor == 0

    def test_default_error_handler(self, res, req):
        ctx = RequestContext([])

        ctx.fail(res, req, "bad input", 400)

        assert res.status == 400
        assert res.body == b"bad input"


class TestStore:
    """Tests for the request-scoped key/value store."""

    def test_set_new_key(self):
        ctx = RequestContext([])

        assert ctx.set("user", "ada") is True
        assert ctx.get("user") == ("ada", True)

    def test_set_existing_key_keeps_old_value(self):
        ctx = RequestContext([])
        ctx.set("user", "ada")

        assert ctx.set("user", "grace") is False
        assert ctx.get("user") == ("ada", True)

    def test_force_set_overwrites(self):
        ctx = RequestContext([])
        ctx.set("user", "ada")

        ctx.force_set("user", "grace")

        assert ctx.get("user") == ("grace", True)

    def test_get_missing(self):
        ctx = RequestContext([])

        assert ctx.get("nope") == (None, False)

    def test_stored_none_is_found(self):
        ctx = RequestContext([])
        ctx.set("empty", None)

        assert ctx.get("empty") == (None, True)

    def test_delete_then_set(self):
        ctx = RequestContext([])
        ctx.set("k", 1)

        ctx.delete("k")

        assert ctx.get("k") == (None, False)
        assert ctx.set("k", 2) is True
        assert ctx.get("k") == (2, True)

    def test_delete_missing_is_noop(self):
        ctx = RequestContext([])

        ctx.delete("missing")
        ctx.delete("missing")

    def test_clear(self):
        ctx = RequestContext([])
        ctx.set("k", 1)

        ctx.clear()

        assert ctx.get("k") == (None, False)

    def test_non_string_keys(self):
        ctx = RequestContext([])
        key = object()

        ctx.set(key, "v")

        assert ctx.get(key) == ("v", True)


class TestContextRegistry:
    """Tests for the request → context map."""

    def test_bind_registers_and_discards(self, req):
        registry = ContextRegistry()
        ctx = RequestContext([])

        with registry.bind(req, ctx) as bound:
            assert bound is ctx
            assert registry.lookup(req) is ctx
            assert len(registry) == 1

        assert len(registry) == 0
        with pytest.raises(ContextNotFoundError):
            registry.lookup(req)

    def test_bind_discards_on_exception(self, req):
        registry = ContextRegistry()
        ctx = RequestContext([])
        ctx.set("k", "v")

        with pytest.raises(RuntimeError):
            with registry.bind(req, ctx):
                raise RuntimeError("handler failed")

        assert len(registry) == 0
        assert ctx.get("k") == (None, False)

    def test_lookup_is_by_identity(self):
        registry = ContextRegistry()
        a = HTTPRequest(method="GET", path="/")
        b = HTTPRequest(method="GET", path="/")
        registry.register(a, RequestContext([]))

        with pytest.raises(ContextNotFoundError):
            registry.lookup(b)

    def test_discard_unknown_is_noop(self, req):
        ContextRegistry().discard(req)

    def test_concurrent_bind(self):
        registry = ContextRegistry()
        errors = []
        barrier = threading.Barrier(8)

        def worker():
            req = HTTPRequest(method="GET", path="/")
            ctx = RequestContext([])
            with registry.bind(req, ctx):
                barrier.wait()
                if registry.lookup(req) is not ctx:
                    errors.append("wrong context")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(registry) == 0
