"""
DollPick — FastAPI Application
==============================
Store directory and review API for crane-game arcades: store pins
converted from the business registry grid, gated review pages, the
review unlock ledger, favorites, and user submissions (ad requests,
store reports, open-store alerts).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from dollpick.config import get_settings
from dollpick.routers import ads, favorites, open_alerts, reviews, store_reports, stores

logger = logging.getLogger(__name__)
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# ── Lifespan (startup / shutdown) ─────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
        - Configure logging.
        - Warm up the coordinate transformer.
        - Verify DB connectivity and create missing tables.
    Shutdown:
        - Dispose engine pool.
    """
    configure_logging()
    logger.info("%s starting up...", settings.app_name)

    from dollpick.spatial.transform import get_coordinate_transformer
    get_coordinate_transformer()

    from sqlalchemy import text

    from dollpick.models.database import engine as db_engine
    async with db_engine.begin() as conn:
        result = await conn.execute(text("SELECT version()"))
        logger.info("PostgreSQL connected (%s)", result.scalar())

    from dollpick.models.database import init_models
    await init_models()
    logger.info("Database schema verified / created.")

    yield

    await db_engine.dispose()
    logger.info("%s shut down.", settings.app_name)


# ── Error handling ────────────────────────────────────────────────
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log anything the routers did not turn into an HTTPException."""
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """A write hit a database constraint; ``get_db`` has already rolled back."""
    logger.warning(
        "Constraint violation on %s %s: %s", request.method, request.url.path, exc.orig,
    )
    return JSONResponse(status_code=409, content={"detail": "Conflicting or unknown record"})


# ── App factory ───────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Crane-game arcade directory: store map pins, reviews with "
            "ad-unlock gating, favorites, banner ads and store reports."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Register routers
    app.include_router(stores.router, prefix="/api")
    app.include_router(reviews.router, prefix="/api")
    app.include_router(favorites.router, prefix="/api")
    app.include_router(ads.router, prefix="/api")
    app.include_router(store_reports.router, prefix="/api")
    app.include_router(open_alerts.router, prefix="/api")

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": settings.app_name}

    return app


# ── Module-level app instance (for `uvicorn dollpick.main:app`) ───
app = create_app()  # pragma: no cover
