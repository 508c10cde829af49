"""
=============================================================================
REQUEST LOGGING MIDDLEWARE
=============================================================================

Access logging with timing and request IDs, written as a mountable
handler:

    router = Router()
    router.mount("/", RequestLogger(router))     # mount FIRST
    router.get("/user/:userid", show_user)

Mounted on "/" before any route is registered, it becomes the first
handler of every chain. It times everything downstream of it: the code
after its next() call runs once the rest of the chain has returned.

=============================================================================
LOG FORMATS
=============================================================================

    TEXT (default):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ 192.168.1.1 - - [10/Jun/2024:10:55:36 +0000] "GET /api" 200 12 5ms │
    │ IP          Timestamp          Method/Path   Status Size Duration  │
    └─────────────────────────────────────────────────────────────────────┘

    JSON:
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"request_id": "a1b2c3d4", "method": "GET", "path": "/api",        │
    │  "status_code": 200, "duration_ms": 5.23, ...}                     │
    └─────────────────────────────────────────────────────────────────────┘

Entries go to the "chainrouter.access" logger:

    logging.getLogger("chainrouter.access").addHandler(file_handler)

=============================================================================
"""

import time
import json
import uuid
import logging
from typing import TYPE_CHECKING, List, Optional
from dataclasses import asdict, dataclass

from .base import Middleware
from ..http.request import HTTPRequest
from ..http.response import ResponseWriter

if TYPE_CHECKING:
    from ..routing.router import Router


logger = logging.getLogger("chainrouter.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one request.

    request_id:     Value sent back in X-Request-ID ("-" when disabled)
    method, path:   From the request line
    query:          Raw query parameters, "" if none
    client_ip:      Client address, "-" if unknown
    user_agent:     User-Agent header, "-" if missing
    status_code:    Status committed by the chain
    content_length: Response body size in bytes
    duration_ms:    Time spent in the rest of the chain
    timestamp:      When the chain finished
    """

    request_id: str
    method: str
    path: str
    query: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status_code"] = int(self.status_code)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {int(self.status_code)} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class RequestLogger(Middleware):
    """
    Access log middleware.

    - Times the downstream chain in milliseconds
    - Sets an X-Request-ID response header for correlation
    - Logs failed chains at ERROR and re-raises
    - Skips configured paths (health checks are noisy)

    Usage:
        router.mount("/", RequestLogger(router, log_format="json",
                                        skip_paths=["/health"]))
    """

    def __init__(
        self,
        router: "Router",
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[List[str]] = None,
    ):
        """
        Args:
            router: Router whose contexts this middleware advances.
            log_format: "text" or "json".
            include_request_id: Add an X-Request-ID header to every response.
            log_level: Level access entries are logged at.
            skip_paths: Exact paths that are never logged.
        """
        if log_format not in ("text", "json"):
            raise ValueError(f"log_format must be 'text' or 'json', got {log_format!r}")

        super().__init__(router)
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    @classmethod
    def from_router(cls, router: "Router", **kwargs) -> "RequestLogger":
        """Build a logger using the router config's log_format."""
        kwargs.setdefault("log_format", router.config.log_format)
        return cls(router, **kwargs)

    def __call__(self, res: ResponseWriter, req: HTTPRequest) -> None:
        # 8 hex chars is plenty for correlating log lines
        request_id = uuid.uuid4().hex[:8]

        # Headers must be set before downstream handlers write the body
        if self.include_request_id:
            res.set_header("X-Request-ID", request_id)

        start_time = time.time()

        try:
            self.next(res, req)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {req.method} {req.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        if req.path in self.skip_paths:
            return

        entry = RequestLog(
            request_id=request_id if self.include_request_id else "-",
            method=req.method,
            path=req.path,
            query=str(req.query_params) if req.query_params else "",
            client_ip=req.client_address[0] or "-",
            user_agent=req.user_agent or "-",
            status_code=res.status,
            content_length=len(res.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())
