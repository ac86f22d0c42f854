# backend/bookit/core/exception_handlers.py
# Gestionnaires d'exceptions globaux : erreurs métier, HTTP, validation et inattendues.

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookit.api.dto.response_format import ErrorResponse
from bookit.core.errors import BookItError
from bookit.core.logging_config import extract_user_data, get_loggers


def register_exception_handlers(app: FastAPI):
    """Enregistre les gestionnaires d'exceptions globaux pour standardiser les réponses."""

    @app.exception_handler(BookItError)
    async def bookit_exception_handler(request: Request, exc: BookItError):
        """Gestionnaire pour les erreurs métier (validation, not found, conflit)."""
        logger_generic, _, _ = get_loggers()
        logger_generic.info(
            "%s %s -> %s (%s)", request.method, request.url.path, exc.http_status, exc.code
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=ErrorResponse.from_exception(exc).model_dump(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Gestionnaire pour les exceptions HTTP standards."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse.from_detail(
                {"code": f"HTTP_{exc.status_code}", "message": exc.detail}
            ).model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Gestionnaire pour les erreurs de validation Pydantic."""
        errors = []
        for error in exc.errors():
            errors.append(
                {
                    "field": " -> ".join(str(loc) for loc in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
            )

        return JSONResponse(
            status_code=422,
            content=ErrorResponse.from_detail(
                {"code": "VALIDATION_ERROR", "message": "Validation failed", "details": errors}
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Gestionnaire pour les exceptions non capturées."""
        _, logger_errors, data_logger = get_loggers()
        logger_errors.exception("Unhandled error on %s %s", request.method, request.url.path)
        data_logger.log_data(
            "unhandled_error",
            {"method": request.method, "path": request.url.path, "error": repr(exc)},
            extract_user_data(request=request),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse.from_detail(
                {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}
            ).model_dump(),
        )
