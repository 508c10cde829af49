"""
=============================================================================
REQUEST INFO
=============================================================================

The request half of the (response-sink, request-info) pair every handler
receives.

The router itself only reads two fields, `method` and `path`. Everything
else is there for handlers: headers, query string, body, and the path
parameters the router extracted for the matched route.

    WSGI environ                HTTPRequest                  Handler
    from the server  ──build──►  dataclass    ──dispatch──►  chain
         │                           │                          │
    {"REQUEST_METHOD": "GET",   HTTPRequest(                def show_user(
     "PATH_INFO": "/user/14",     method="GET",                 res, req):
     "QUERY_STRING": "a=1",       path="/user/14",              ...
     ...}                         path_params={"userid": "14"},
                                  ...)

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import parse_qs
import json


@dataclass
class HTTPRequest:
    """
    Represents one in-flight HTTP request.

    Attributes:
        method:         HTTP method, upper-case ("GET", "POST", ...)
        path:           Request path without the query string. Matched
                        against route templates exactly as given: no
                        trailing-slash normalisation.
        version:        HTTP version string ("HTTP/1.1")
        headers:        Header name → value, names lower-cased
        query_params:   "?a=1&a=2&b=3" → {"a": ["1", "2"], "b": ["3"]}
        body:           Raw request body
        path_params:    Filled in by the router on match:
                        "/user/:userid" + "/user/14" → {"userid": "14"}
        client_address: (ip, port) of the peer, when known

    Instances are identity-keyed by the router while their chain runs, so
    one HTTPRequest object must not be dispatched twice concurrently.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""

    # Router-injected parameters
    path_params: Dict[str, str] = field(default_factory=dict)

    client_address: tuple[str, int] = ("", 0)

    _body_json: Optional[Any] = field(default=None, repr=False)

    @classmethod
    def from_environ(cls, environ: Dict[str, Any]) -> "HTTPRequest":
        """
        Build a request from a WSGI environ (PEP 3333).

        PATH_INFO arrives as a latin-1 decoded native string; it is
        re-decoded as UTF-8 so templates and paths compare as text.
        """
        raw_path = environ.get("PATH_INFO") or "/"
        path = raw_path.encode("latin-1").decode("utf-8", "replace")

        headers: Dict[str, str] = {}
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                headers[key[5:].replace("_", "-").lower()] = value
        if environ.get("CONTENT_TYPE"):
            headers["content-type"] = environ["CONTENT_TYPE"]
        if environ.get("CONTENT_LENGTH"):
            headers["content-length"] = environ["CONTENT_LENGTH"]

        body = b""
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        if length > 0 and environ.get("wsgi.input") is not None:
            body = environ["wsgi.input"].read(length)

        try:
            port = int(environ.get("REMOTE_PORT") or 0)
        except ValueError:
            port = 0

        return cls(
            method=environ.get("REQUEST_METHOD", "GET").upper(),
            path=path,
            version=environ.get("SERVER_PROTOCOL", "HTTP/1.1"),
            headers=headers,
            query_params=parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True),
            body=body,
            client_address=(environ.get("REMOTE_ADDR", ""), port),
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def content_type(self) -> Optional[str]:
        """Content-Type without parameters ("application/json")."""
        ct = self.headers.get("content-type", "")
        return ct.split(";")[0].strip().lower() or None

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def json(self) -> Any:
        """
        Request body parsed as JSON, cached after the first access.

        Raises:
            ValueError: body is not valid UTF-8 JSON.
        """
        if self._body_json is None and self.body:
            self._body_json = json.loads(self.body.decode("utf-8"))
        return self._body_json

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter."""
        values = self.query_params.get(name, [])
        return values[0] if values else default
