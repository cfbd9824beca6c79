"""
FastAPI Application — Autotrader Backend.

Architecture:
  - SQLite (dev) / PostgreSQL (prod) via SQLAlchemy
  - Local filesystem storage for listing images
  - JWT bearer authentication
  - Magic-number upload validation
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.dependencies import get_file_validator, get_storage
from src.api.routes.auth import router as auth_router
from src.api.routes.files import router as files_router
from src.api.routes.images import router as images_router
from src.api.routes.listings import router as listings_router
from src.config.settings import get_settings
from src.core.exceptions import (
    AuthenticationError,
    DuplicateUserError,
    InvalidFileError,
    InvalidSortFieldError,
    ListingNotFoundError,
    ListingStateError,
    MarketplaceError,
    PermissionDeniedError,
    StorageError,
    StorageFileNotFoundError,
)
from src.infrastructure.db.database import init_db

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Autotrader Backend",
    description="Car marketplace API: accounts, listings, image upload and storage.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)


# ── Startup ──
@app.on_event("startup")
async def startup():
    """Configure logging, create tables and prepare storage."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    init_db()
    get_storage()
    validator = get_file_validator()
    logger.info(
        f"Autotrader backend started (env={settings.env}, "
        f"upload types={','.join(validator.allowed_types)}, max={validator.max_size_bytes} bytes)"
    )


# Register routes
app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(listings_router, prefix="/api", tags=["Listings"])
app.include_router(images_router, prefix="/api", tags=["Images"])
app.include_router(files_router, prefix="/api", tags=["Files"])


# ── Error handling ──
# most specific first: the lookup walks the exception's MRO
_STATUS_BY_ERROR: dict[type[Exception], int] = {
    StorageFileNotFoundError: 404,
    StorageError: 400,
    InvalidFileError: 400,
    DuplicateUserError: 400,
    AuthenticationError: 401,
    PermissionDeniedError: 403,
    ListingNotFoundError: 404,
    ListingStateError: 409,
}


@app.exception_handler(MarketplaceError)
async def handle_domain_error(request: Request, exc: MarketplaceError):
    status_code = next(
        (code for cls in type(exc).__mro__ if (code := _STATUS_BY_ERROR.get(cls))),
        400,
    )
    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content={"detail": exc.message}, headers=headers)


@app.exception_handler(InvalidSortFieldError)
async def handle_sort_error(request: Request, exc: InvalidSortFieldError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# ── Health ──
@app.get("/health")
async def health():
    settings = get_settings()
    db_type = "PostgreSQL" if "postgres" in settings.database_url else "SQLite"
    return {
        "status": "ok",
        "version": "1.0.0",
        "database": db_type,
        "storage_backend": settings.storage_backend,
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("src.api.main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)
