"""Storefront FastAPI application.

Processes commands synchronously over HTTP. Every request runs inside the
storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.domain import storefront
from storefront.utils.logging import add_context, clear_context

# Initialized at module level so uvicorn workers share it.
# PROTEAN_ENV picks the config overlay from domain.toml.
storefront.init()

app = FastAPI(
    title="Storefront API",
    description="Storefront ordering: product pricing, carts, orders and tracking",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and bind a request id to the logs."""
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    add_context(request_id=request_id, path=request.url.path)
    try:
        with storefront.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    response.headers["x-request-id"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api import (  # noqa: E402
    cart_router,
    order_router,
    product_router,
    register_error_handlers,
)

app.include_router(product_router)
app.include_router(order_router)
app.include_router(cart_router)

register_exception_handlers(app)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
