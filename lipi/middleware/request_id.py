import re
import uuid
from starlette.middleware.base import BaseHTTPMiddleware

_VALID_RID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Echo a caller's X-Request-Id, or mint one, so pipeline logs can be correlated."""

    async def dispatch(self, request, call_next):
        presented = request.headers.get("X-Request-Id", "")
        rid = presented if _VALID_RID.match(presented) else str(uuid.uuid4())
        request.state.request_id = rid
        response = await call_next(request)
        response.headers["X-Request-Id"] = rid
        return response
