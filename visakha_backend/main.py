"""
FastAPI application bootstrap with: \n
- Lifespan-managed document store connection and bootstrap admin seeding \n
- CORS configured for the dashboard web client \n
- `{error, message?}` error bodies for every failure \n
- Static file serving for the built web client, when present \n
- Catch-all route to support client-side routing \n

Environment contract (from `settings`): \n
- DATABASE_URL / DB_*: document store location. \n
- FRONTEND_URLS: allowed CORS origins. \n
- FRONTEND_DIST_DIR: built web client directory. \n
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from visakha_backend.api import admin_api, auth, fast_api
from visakha_backend.database.config.config import settings
from visakha_backend.database.config.connection_engine import StoreClient
from visakha_backend.database.core.collection_crud import CollectionService
from visakha_backend.database.core.curation import CurationService
from visakha_backend.database.core.feedback_conversations import FeedbackConversationService
from visakha_backend.database.core.stats import StatsService
from visakha_backend.database.core.team import TeamService

logger = logging.getLogger("uvicorn")
"""Logger instance for capturing and emitting Uvicorn server logs."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    App lifespan manager.

    Notes
    ------------
    - On startup: connect the store (creating missing collections) and seed
      the bootstrap super admin if there are no administrators.
    - On shutdown: dispose of the store's connection pool.
    """
    store: StoreClient = app.state.store
    store.connect()
    if app.state.team_service.ensure_bootstrap_admin():
        logger.info("Seeded bootstrap super admin %s", settings.BOOTSTRAP_ADMIN_EMAIL)
    try:
        yield
    finally:
        store.close()
        logger.info("App shutting down, store closed.")


def error_body(error: str, message: Optional[str] = None) -> dict:
    body = {"error": error}
    if message:
        body["message"] = message
    return body


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc.detail, dict):
            body = dict(exc.detail)
        else:
            body = error_body(str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        problems = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err.get("loc", ())[1:])
            problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg", ""))
        return JSONResponse(status_code=400, content=error_body("Invalid request", "; ".join(problems)))

    @app.exception_handler(SQLAlchemyError)
    async def store_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Store failure on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=error_body("Internal Server Error", str(exc)))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=error_body("Internal Server Error", str(exc)))


def mount_frontend(app: FastAPI, dist_dir: str) -> None:
    """Serve the built web client; unknown GET paths fall back to index.html."""
    index_file = os.path.join(dist_dir, "index.html")
    if not os.path.isfile(index_file):
        logger.info("No web client found at %s; serving the API only.", dist_dir)
        return

    root = os.path.realpath(dist_dir)
    assets_dir = os.path.join(dist_dir, "assets")
    if os.path.isdir(assets_dir):
        app.mount("/assets", StaticFiles(directory=assets_dir), name="static")

    # Must be registered after every API route.
    @app.get("/", include_in_schema=False)
    @app.get("/{full_path:path}", include_in_schema=False)
    def serve_web_client(full_path: str = ""):
        """
        Serve the web client's index.html for all non-API routes to support client-side routing.
        """
        candidate = os.path.realpath(os.path.join(dist_dir, full_path))
        if full_path and candidate.startswith(root + os.sep) and os.path.isfile(candidate):
            return FileResponse(candidate)
        return FileResponse(index_file)


def create_app(store: Optional[StoreClient] = None) -> FastAPI:
    """
    Build the application around a store client.

    Parameters
    ----------
    store : StoreClient, optional
        Injected store; defaults to one built from `settings`. Tests pass an
        in-memory store here.
    """
    app = FastAPI(title="Visakha Admin API", lifespan=lifespan)

    store = store or StoreClient.from_settings()
    app.state.store = store
    app.state.feedback_service = FeedbackConversationService(store)
    app.state.curation_service = CurationService(store)
    app.state.team_service = TeamService(store)
    app.state.stats_service = StatsService(store)
    app.state.collection_service = CollectionService(store)

    # -----------------------
    # CORS configuration
    # -----------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_URLS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # -----------------------
    # API routes
    # -----------------------
    app.include_router(fast_api.router)
    app.include_router(auth.router)
    app.include_router(admin_api.router)

    @app.get("/health", response_class=PlainTextResponse)
    def health():
        return "OK"

    mount_frontend(app, settings.FRONTEND_DIST_DIR)
    return app


logging.basicConfig(level=settings.LOG_LEVEL)

app = create_app()
"""Module-level application used by `uvicorn visakha_backend.main:app`."""
