"""
=============================================================================
MIDDLEWARE
=============================================================================

Middleware are ordinary handlers, usually mounted on a prefix, that call
next() to continue the chain:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   router.mount("/", RequestLogger(router))                          │
    │   router.mount("/api", require_token)                               │
    │                                                                      │
    │   GET /api/items  →  RequestLogger → require_token → list_items     │
    │                      ◄──────── post-processing on the way out ────  │
    └─────────────────────────────────────────────────────────────────────┘

RequestLogger:
    Access log with timing and X-Request-ID correlation.

=============================================================================
"""

from .base import Middleware
from .logging import RequestLog, RequestLogger

__all__ = [
    "Middleware",
    "RequestLog",
    "RequestLogger",
]
