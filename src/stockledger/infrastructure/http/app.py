"""FastAPI application factory.

``create_app`` takes the wired services so tests can point the API at a
temporary data directory.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stockledger.domain.exceptions import DomainException, ValidationError
from stockledger.infrastructure.bootstrap import Services
from stockledger.infrastructure.http.routes import router
from stockledger.logging_config import get_logger

logger = get_logger("infrastructure.http")

_STATUS_BY_CODE = {
    "NOT_FOUND": 404,
    "VALIDATION": 422,
    "INVALID_QUANTITY": 422,
    "USER_REQUIRED": 422,
    "DUPLICATE_SKU": 422,
    "INSUFFICIENT_STOCK": 409,
    "CONFLICT": 409,
    "IN_USE": 409,
    "INTERNAL": 500,
}


def create_app(services: Services) -> FastAPI:
    app = FastAPI(title="Stock Ledger", version="0.1.0")
    app.state.services = services
    app.include_router(router)

    @app.exception_handler(DomainException)
    async def domain_error(request: Request, exc: DomainException) -> JSONResponse:
        status_code = _STATUS_BY_CODE.get(exc.code, 400)
        if status_code >= 500:
            logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
        else:
            logger.info(
                "%s %s rejected: %s",
                request.method,
                request.url.path,
                exc.code,
            )
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.code, "message": str(exc)},
        )

    @app.exception_handler(RequestValidationError)
    async def malformed_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(_describe(error) for error in exc.errors())
        logger.info("%s %s rejected: malformed request", request.method, request.url.path)
        return JSONResponse(
            status_code=422,
            content={"error": ValidationError.code, "message": f"Invalid request: {problems}"},
        )

    return app


def _describe(error: dict) -> str:
    # drop the leading "body" / "query" segment of the location
    location = ".".join(str(part) for part in error.get("loc", ())[1:])
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message
