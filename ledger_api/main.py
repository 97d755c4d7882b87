# ledger_api/main.py
import uvicorn
import os
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ledger_api.core.config import settings
from ledger_api.core.database import create_db_and_tables
from ledger_api.core.errors import LedgerError, invalid_body
from ledger_api.api.v1.api import api_router

# Register every table on Base.metadata before create_all runs
from ledger_api.models import transaction, user  # noqa: F401

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login and logout"},
        {"name": "transactions", "description": "Shared income/expense ledger"},
        {"name": "User Management", "description": "Administrator user management"},
        {"name": "reports", "description": "Aggregate reports and CSV export"},
    ],
)

# CORS Configuration
origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",  # Local development
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------------------------------------
# ERROR HANDLERS: every error body is {"error": <message>}
# ------------------------------------------------------------
def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return _error_response(exc.status_code, exc.message)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return _error_response(405, "Method not allowed")
    detail = exc.detail
    if isinstance(detail, dict):
        detail = detail.get("reason") or detail.get("code") or str(detail)
    return _error_response(exc.status_code, str(detail), headers=getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    error = invalid_body(exc.errors())
    return _error_response(error.status_code, error.message)

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Unexpected store or provider failures: log the detail, return a generic message"""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return _error_response(500, LedgerError.default_message)

# ------------------------------------------------------------
# ROOT AND HEALTH ENDPOINTS
# ------------------------------------------------------------
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": f"{settings.APP_NAME} is running!",
        "version": settings.VERSION
    }

@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT
    }

# ------------------------------------------------------------
# BUSINESS LOGIC ROUTES
# ------------------------------------------------------------
app.include_router(api_router, prefix=settings.API_PREFIX)

# ------------------------------------------------------------
# STARTUP EVENT
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    """Create database tables (idempotent; Alembic manages later changes)"""
    await create_db_and_tables()
    logger.info("✅ Database tables created or verified")
    logger.info(f"✅ API mounted at {settings.API_PREFIX} ({settings.ENVIRONMENT})")

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("ledger_api.main:app", host="0.0.0.0", port=port, reload=False)
