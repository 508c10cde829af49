"""
=============================================================================
RESPONSE SINK
=============================================================================

Handlers do not return responses. They write into a shared, mutable sink
that travels down the chain together with the request:

    handler 1          handler 2          handler 3
    ─────────          ─────────          ─────────
    res.write("a")
    ctx.next(res, req) ──►
                       res.write("b")
                       ctx.next(res, req) ──►
                                          res.write("c")
                       ◄──────────────────
    ◄──────────────────
                                    body == b"abc"

When the chain has finished, the sink is frozen into an HTTPResponse which
the WSGI adapter hands to the server.

=============================================================================
STATUS COMMIT RULES
=============================================================================

    write_header(code)   First call fixes the status. Later calls are
                         ignored and logged: the status of a response can
                         only be decided once.
    write(data)          Commits 200 OK if no status was written yet.
    set_header(...)      Allowed at any time before the response is built.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union
import logging

from .status_codes import HTTPStatus, reason_phrase


logger = logging.getLogger(__name__)


@dataclass
class HTTPResponse:
    """
    A finished response.

    Built by ResponseWriter.to_response() once the handler chain has
    returned; read by the WSGI adapter.
    """

    status: int = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """Example: "HTTP/1.1 200 OK"."""
        return f"{self.version} {self.wsgi_status}"

    @property
    def wsgi_status(self) -> str:
        """Status string in the form start_response() expects: "404 Not Found"."""
        return f"{int(self.status)} {reason_phrase(self.status)}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a header; returns self for chaining."""
        self.headers[name] = value
        return self

    def wsgi_headers(self) -> List[Tuple[str, str]]:
        """Header list for start_response(), with Content-Length filled in."""
        headers = dict(self.headers)
        if "Content-Length" not in headers:
            headers["Content-Length"] = str(len(self.body))
        return list(headers.items())


class ResponseWriter:
    """
    The response sink handed to every handler in a chain.

    Usage inside a handler:

        def show_user(res, req):
            res.set_header("Content-Type", "text/plain; charset=utf-8")
            res.write("user detail " + req.path_params["userid"])
    """

    def __init__(self):
        self.headers: Dict[str, str] = {}
        self._status: Optional[int] = None
        self._chunks: List[bytes] = []

    @property
    def status(self) -> int:
        """Committed status, or 200 if nothing has been committed yet."""
        return self._status if self._status is not None else HTTPStatus.OK

    @property
    def written(self) -> bool:
        """True once a status has been committed."""
        return self._status is not None

    @property
    def body(self) -> bytes:
        return b"".join(self._chunks)

    def set_header(self, name: str, value: str) -> "ResponseWriter":
        self.headers[name] = value
        return self

    def write_header(self, code: int) -> None:
        """
        Commit the response status.

        Raises:
            ValueError: code is outside 100-599.
        """
        if not 100 <= int(code) <= 599:
            raise ValueError(f"Invalid status code: {code}")

        if self._status is not None:
            logger.warning(
                f"Superfluous write_header({code}), status already {self._status}"
            )
            return

        try:
            self._status = HTTPStatus(code)
        except ValueError:
            self._status = int(code)

    def write(self, data: Union[str, bytes]) -> int:
        """
        Append to the body. Strings are encoded as UTF-8.

        Returns:
            Number of bytes appended.
        """
        if self._status is None:
            self.write_header(HTTPStatus.OK)

        if isinstance(data, str):
            data = data.encode("utf-8")
        self._chunks.append(data)
        return len(data)

    def to_response(self) -> HTTPResponse:
        """Freeze the sink into an HTTPResponse."""
        return HTTPResponse(
            status=self.status,
            headers=dict(self.headers),
            body=self.body,
        )
