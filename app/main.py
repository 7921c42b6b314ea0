# ============================================================================
# FILE: app/main.py
# ============================================================================
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool
from app.api.v1.router import api_router
from app.core.cache import RedisCache
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging
from app.core.tasks import drain
from app.core.tmdb_client import TMDBClient
from app.config import DEFAULT_SECRET_KEY, settings
from app.db.session import Database
import logging

logger = logging.getLogger(__name__)


def create_app(database: Database = None, tmdb: TMDBClient = None) -> FastAPI:
    """Build the application; collaborators can be injected for tests"""
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Movie and TV discovery backend with accounts and per-user libraries",
        version="1.0.0"
    )

    # CORS middleware; credentials are required for the session cookie
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix="/api")

    @app.on_event("startup")
    async def startup_event():
        """Initialize shared resources on startup"""
        logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})")
        if not settings.is_development and settings.SECRET_KEY == DEFAULT_SECRET_KEY:
            logger.warning("SECRET_KEY is the built-in default; set it before serving real users")

        app.state.database = database or Database()
        app.state.database.connect()
        app.state.database.create_tables()

        if tmdb is not None:
            app.state.tmdb = tmdb
        else:
            cache = RedisCache()
            await cache.connect()
            app.state.tmdb = TMDBClient(cache=cache)

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown"""
        logger.info(f"Shutting down {settings.APP_NAME}")
        await drain()
        await app.state.tmdb.close()
        if app.state.tmdb.cache is not None:
            await app.state.tmdb.cache.close()
        app.state.database.dispose()

    @app.get("/health")
    async def health_check(request: Request):
        db_ok = await run_in_threadpool(request.app.state.database.health_check)
        if not db_ok:
            return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "unavailable"})
        return {"status": "healthy", "database": "ok"}

    return app


app = create_app()
