import logging
import time
import uuid
from typing import Any, Dict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


def _caller(request: Request) -> Dict[str, Any]:
    """Who the request resolved to, as recorded by the auth dependencies."""
    state = request.state
    caller: Dict[str, Any] = {
        "student_id": getattr(state, "student_id", None),
        "staff_id": getattr(state, "staff_id", None),
    }
    rejection = getattr(state, "session_rejection", None)
    caller["session_rejection"] = rejection.value if rejection else None
    return caller


def _caller_label(caller: Dict[str, Any]) -> str:
    parts = []
    if caller["student_id"] is not None:
        parts.append(f"student={caller['student_id']}")
    if caller["staff_id"] is not None:
        parts.append(f"staff={caller['staff_id']}")
    if caller["session_rejection"]:
        parts.append(f"rejected={caller['session_rejection']}")
    return f" [{' '.join(parts)}]" if parts else ""


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.perf_counter()
        path = request.url.path
        method = request.method
        client_ip = request.client.host if request.client else None

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            caller = _caller(request)
            logger.error(
                f"[{request_id}] {method} {path} - ERROR{_caller_label(caller)}",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "client_ip": client_ip,
                    "duration_ms": duration_ms,
                    "error": str(exc),
                    **caller,
                }
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        status_code = response.status_code
        caller = _caller(request)

        log_level = logging.WARNING if status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"[{request_id}] {method} {path} - {status_code} ({duration_ms}ms){_caller_label(caller)}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "client_ip": client_ip,
                "status_code": status_code,
                "duration_ms": duration_ms,
                **caller,
            }
        )

        response.headers["X-Request-ID"] = request_id
        return response
