"""
=============================================================================
REQUEST / RESPONSE PRIMITIVES
=============================================================================

The two objects every handler receives, plus status codes.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST INFO (request.py)                                           │
    │ ─────────────────────────────────────────────────────────────────── │
    │ HTTPRequest: method, path, headers, query, body, path_params        │
    │ Built from a WSGI environ by HTTPRequest.from_environ()             │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE SINK (response.py)                                         │
    │ ─────────────────────────────────────────────────────────────────── │
    │ ResponseWriter: write(), write_header(), set_header()               │
    │ HTTPResponse:   the frozen result handed back to the server         │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPRequest
from .response import HTTPResponse, ResponseWriter
from .status_codes import HTTPStatus, reason_phrase

__all__ = [
    "HTTPRequest",
    "HTTPResponse",
    "ResponseWriter",
    "HTTPStatus",
    "reason_phrase",
]
