"""
Request tracking middleware for logging correlation.
"""

import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .context import generate_transaction_id, set_transaction_id

TRANSACTION_HEADER = "x-transaction-id"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Sets the transaction ID for the request and echoes it in the response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        txn_id = request.headers.get(TRANSACTION_HEADER) or generate_transaction_id()
        set_transaction_id(txn_id)

        response = await call_next(request)
        response.headers[TRANSACTION_HEADER] = txn_id

        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line when a request starts and one when it completes.

    Must be added before RequestIdMiddleware so it runs inside it and sees the
    transaction id.
    """

    def __init__(self, app, logger: logging.Logger | None = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("kostkelola_backend.requests")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        self.logger.info(
            "Request started",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client_ip": client_ip,
                "user_agent": request.headers.get("user-agent", "unknown"),
            },
        )

        response = await call_next(request)

        self.logger.info(
            "Request completed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
            },
        )
        return response
