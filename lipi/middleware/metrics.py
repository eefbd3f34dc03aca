import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware


class MetricsMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        self.requests_total = {}
        self.errors_total = {}
        self.latency_ms = {}

    async def dispatch(self, request, call_next):
        client_id = request.headers.get("X-Client-Id", "unknown")
        route = request.url.path
        start = time.perf_counter()
        rid = getattr(request.state, "request_id", "n/a")
        key = (client_id, route)
        self.requests_total[key] = self.requests_total.get(key, 0) + 1
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            if status >= 500:
                self.errors_total[key] = self.errors_total.get(key, 0) + 1
            return response
        except Exception:
            self.errors_total[key] = self.errors_total.get(key, 0) + 1
            logging.exception("[METRICS] request_id=%s client_id=%s route=%s error", rid, client_id, route)
            raise
        finally:
            elapsed = (time.perf_counter() - start) * 1000
            self.latency_ms[key] = elapsed
            logging.info(
                "[METRICS] request_id=%s client_id=%s route=%s status=%d latency_ms=%.2f",
                rid,
                client_id,
                route,
                status,
                elapsed,
            )
