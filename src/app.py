"""Shopsy FastAPI application.

Web server that processes marketplace commands synchronously via HTTP.
Every request runs inside the marketplace domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from marketplace.domain import marketplace
from protean.integrations.fastapi import register_exception_handlers

marketplace.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Shopsy API",
    description="Multi-tenant shop management: shops, carts, orders and banners",
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
    """Push the marketplace domain context for each request."""
    with marketplace.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Error handlers and request log context
# ---------------------------------------------------------------------------
from marketplace.api.context import register_request_context  # noqa: E402
from marketplace.api.errors import register_error_handlers  # noqa: E402

register_exception_handlers(app)
register_error_handlers(app)
register_request_context(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from marketplace.api import banner_router, cart_router, order_router, shop_router, user_router  # noqa: E402

app.include_router(user_router)
app.include_router(shop_router)
app.include_router(order_router)
app.include_router(cart_router)
app.include_router(banner_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": marketplace.name})
