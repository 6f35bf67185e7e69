from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from restaurant_api.core.request_context import clear_request_context, set_request_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
# ids vindos de fora só são aceitos se forem curtos e sem espaços
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


def _user_id_from_state(request: Request) -> Optional[str]:
    user_id = getattr(getattr(request.state, "user", None), "id", None)
    return None if user_id is None else str(user_id)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id and logs one "request completed" line."""

    async def dispatch(self, request: Request, call_next):
        request_id = resolve_request_id(request)
        request.state.request_id = request_id
        set_request_context(request_id=request_id)
        started = time.perf_counter()

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            logger.log(
                logging.WARNING if status_code >= 500 else logging.INFO,
                "request completed",
                extra={
                    "request_id": request_id,
                    "user_id": _user_id_from_state(request),
                    "endpoint": request.url.path,
                    "method": request.method,
                    "status_code": status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            clear_request_context()
