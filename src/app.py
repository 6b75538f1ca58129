"""OpticPOS FastAPI application.

Web server for the shop counter. Commands are processed synchronously and
every request runs inside the `pos` domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml:
#   - "test"       → in-memory stores
#   - "production" → SQLite via SQLAlchemy
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from pos.domain import pos
from pos.utils.logging import configure_logging

configure_logging()
pos.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="OpticPOS API",
    description="Point of sale for the optical shop counter",
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
    """Push the Protean domain context for each request."""
    with pos.domain_context():
        response = await call_next(request)
    return response


register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from pos.api import (  # noqa: E402
    checkout_router,
    customer_router,
    product_router,
    register_pos_exception_handlers,
    sales_router,
)

register_pos_exception_handlers(app)

app.include_router(product_router)
app.include_router(customer_router)
app.include_router(checkout_router)
app.include_router(sales_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": pos.name})
