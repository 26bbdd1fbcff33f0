import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from dentalbill.core.logger import logger

class LogMiddleware(BaseHTTPMiddleware):
    """One log line per request, plus an X-Process-Time header on the response."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        client = request.client.host if request.client else "-"

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"{request.method} {request.url.path} from {client} raised after "
                f"{time.perf_counter() - start_time:.4f}s"
            )
            raise

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            f"Method: {request.method} | "
            f"Path: {request.url.path} | "
            f"Client: {client} | "
            f"Status: {response.status_code} | "
            f"Duration: {process_time:.4f}s"
        )
        return response
