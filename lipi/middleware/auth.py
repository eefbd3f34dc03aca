import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from lipi.core.security import verify_api_key
from lipi.core.rate_limit import RateLimiter
from lipi.core.config import settings

PUBLIC_PATHS = ("/health", "/docs", "/openapi.json")


class AuthMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, client_registry, max_per_minute=None):
        super().__init__(app)
        self.client_registry = client_registry
        limit = settings.RATE_LIMIT_PER_MIN if max_per_minute is None else max_per_minute
        self.rate_limiter = RateLimiter(max_per_minute=limit)

    async def dispatch(self, request, call_next):
        if request.url.path in PUBLIC_PATHS:
            return await call_next(request)

        client_id = request.headers.get("X-Client-Id")
        api_key = request.headers.get("X-API-Key")
        rid = getattr(request.state, "request_id", "n/a")

        if not client_id or not api_key:
            logging.warning("auth_failed request_id=%s reason=missing_headers", rid)
            return JSONResponse({"detail": "Unauthorized"}, status_code=401)

        if client_id not in self.client_registry:
            logging.warning("auth_failed request_id=%s client_id=%s reason=unknown_client", rid, client_id)
            return JSONResponse({"detail": "Unauthorized"}, status_code=401)

        if not verify_api_key(client_id, api_key, self.client_registry):
            logging.warning("auth_failed request_id=%s client_id=%s reason=key_mismatch", rid, client_id)
            return JSONResponse({"detail": "Unauthorized"}, status_code=401)

        if not self.rate_limiter.allow(client_id):
            logging.info("rate_limited request_id=%s client_id=%s", rid, client_id)
            return JSONResponse({"detail": "Rate limit exceeded"}, status_code=429)

        request.state.client_id = client_id
        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(self.rate_limiter.remaining(client_id))
        return response
