"""Maps storefront exceptions to HTTP responses.

Registered next to Protean's own handlers, which cover the generic
``ValidationError`` (400) and ``ObjectNotFoundError`` (404) cases.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.exceptions import (
    EmptyOrderError,
    InvalidCouponError,
    InvalidStatusError,
    OrderNotFoundError,
)


async def _bad_request(request: Request, exc) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.messages})


async def _not_found(request: Request, exc) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": exc.messages})


def register_error_handlers(app: FastAPI) -> None:
    for exc_class in (EmptyOrderError, InvalidStatusError, InvalidCouponError):
        app.add_exception_handler(exc_class, _bad_request)
    app.add_exception_handler(OrderNotFoundError, _not_found)
