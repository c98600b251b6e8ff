from tender_system.core.config import get_settings
from tender_system.core.errors import (
    AlreadyExistsError,
    DomainError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)
from tender_system.core.logging import configure_logging
from tender_system.core.middleware import RequestIdMiddleware
from tender_system.api.v1.router import v1_router

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
import uvicorn

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    InvalidArgumentError: 400,
    UnauthorizedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    AlreadyExistsError: 409,
}


def status_for(exc: DomainError) -> int:
    for kind, status_code in STATUS_BY_ERROR.items():
        if isinstance(exc, kind):
            return status_code
    return 500


def _reason(request: Request, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"reason": message},
        headers={get_settings().request_id_header: getattr(request.state, "request_id", "") or ""},
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("domain error", exc_info=exc, extra={"path": request.url.path})
    else:
        logger.info(
            "request rejected",
            extra={"path": request.url.path, "status_code": status_code, "reason": str(exc)},
        )
    return _reason(request, str(exc), status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        where = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{where}: {first.get('msg', 'invalid request')}"
    else:
        message = "invalid request"
    return _reason(request, message, 400)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error", extra={"path": request.url.path})
    return _reason(request, "internal server error", 500)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
    )

    # Middleware: Request ID
    app.add_middleware(RequestIdMiddleware, header_name=settings.request_id_header)

    # Error kinds → HTTP status
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(app, host=settings.server_host, port=settings.server_port)
