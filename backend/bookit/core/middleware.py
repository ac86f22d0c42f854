# backend/bookit/core/middleware.py
# Limite de taille des corps de requête (contrôle sur Content-Length).

from collections.abc import Sequence

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from bookit.api.dto.response_format import ErrorResponse


class MaxBodySizeMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_body_size: int, exclude_paths: Sequence[str] = ()):
        super().__init__(app)
        self.max_body_size = max_body_size
        self.exclude_paths = exclude_paths

    async def dispatch(self, request, call_next):
        for p in self.exclude_paths:
            if request.url.path.startswith(p):
                return await call_next(request)

        cl = request.headers.get("content-length")
        if cl is not None:
            try:
                too_large = int(cl) > self.max_body_size
            except ValueError:
                # Content-Length invalide → on laisse passer, le parsing JSON échouera
                too_large = False
            if too_large:
                return JSONResponse(
                    ErrorResponse.from_detail(
                        f"Request body too large (>{self.max_body_size} bytes).",
                        code="PAYLOAD_TOO_LARGE",
                    ).model_dump(),
                    status_code=413,
                )
        return await call_next(request)
