"""HTTP mapping for errors outside Protean's default exception handlers."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pos.shared.errors import SalePersistenceFailure

logger = structlog.get_logger(__name__)


async def sale_persistence_failure_handler(request: Request, exc: SalePersistenceFailure) -> JSONResponse:
    logger.error("Sale not committed", operation=exc.operation, invoice_number=exc.invoice_number)
    return JSONResponse(status_code=503, content={"error": exc.messages})


def register_pos_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SalePersistenceFailure, sale_persistence_failure_handler)
