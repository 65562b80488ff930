"""
Domain exceptions and the FastAPI exception handlers that turn them (and every
other failure) into JSON error bodies.
"""
import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class RaktSarthiError(Exception):
    """Expected, user-reportable condition raised by the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Request could not be completed"

    def __init__(self, detail: str = None):
        if detail:
            self.detail = detail
        super().__init__(self.detail)


class InventoryGroupNotFound(RaktSarthiError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Blood group not found in inventory"

    def __init__(self, blood_group: str):
        self.blood_group = blood_group
        super().__init__(f"Blood group {blood_group} not found in inventory")


class DonorNotFound(RaktSarthiError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Donor not found"


class AlreadyRegistered(RaktSarthiError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Already registered"


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "N/A")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "request_id": _request_id(request)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(
        f"Validation error on {request.method} {request.url.path}: {len(exc.errors())} error(s)",
        extra={"request_id": _request_id(request)}
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors()), "request_id": _request_id(request)},
    )


async def domain_exception_handler(request: Request, exc: RaktSarthiError):
    logger.info(
        f"{type(exc).__name__}: {exc.detail}",
        extra={"request_id": _request_id(request)}
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "request_id": _request_id(request)},
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={"request_id": _request_id(request)}
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "request_id": _request_id(request)},
    )
