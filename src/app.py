"""Marketplace FastAPI application.

Serves the cart, order, enquiry and supplier APIs, processing commands
synchronously. Each request is wrapped in the correct domain context based
on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from catalogue.domain import catalogue
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ordering.domain import ordering
from protean.integrations.fastapi import register_exception_handlers
from shared.errors import register_error_handlers
from shared.logging import bind_request_context, clear_request_context, configure_logging
from sourcing.domain import sourcing

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the configuration overlay.
configure_logging()

catalogue.init()
ordering.init()
sourcing.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/cart": ordering,
    "/orders": ordering,
    "/enquiries": sourcing,
    "/suppliers": sourcing,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Marketplace API",
    description="B2B marketplace: cart, checkout, orders, enquiries and supplier onboarding",
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
    """Push the correct Protean domain context for each request."""
    bind_request_context(path=request.url.path, user_id=request.headers.get("x-user-id"))
    try:
        domain = _resolve_domain(request.url.path)
        if domain is not None:
            with domain.domain_context():
                return await call_next(request)
        # No domain match: pass through (health check, docs, etc.)
        return await call_next(request)
    finally:
        clear_request_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from ordering.api.routes import cart_router, order_router  # noqa: E402
from sourcing.api.routes import enquiry_router, supplier_router  # noqa: E402

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(enquiry_router)
app.include_router(supplier_router)

register_exception_handlers(app)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "catalogue": {"name": catalogue.name},
                "ordering": {"name": ordering.name},
                "sourcing": {"name": sourcing.name},
            },
        }
    )
