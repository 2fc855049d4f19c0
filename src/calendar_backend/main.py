# main.py
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
load_dotenv()
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.middleware.sessions import SessionMiddleware
import uvicorn
import logging

from calendar_backend.api import auth_router, categories_router, events_router, health_router
from calendar_backend.api.middleware import register_error_handlers
from calendar_backend.core.config import Settings, get_settings, AUTH_MODE_SESSION
from calendar_backend.core.database import init_db, close_db
from calendar_backend.core.dependencies import get_current_user
from calendar_backend.core.security import build_authenticator

logger = logging.getLogger("MAIN")

APP_LOGGERS = ["calendar_backend", "CORE_CONFIG", "CORE_DATABASE", "CORE_SECURITY", "MAIN",
               "AUTH_API", "CATEGORIES_API", "HEALTH_API_LOGGER", "EventService", "IdentityService"]


def _configure_logging(debug: bool) -> None:
    # Reuse uvicorn's handler so app logs share its format
    level = logging.DEBUG if debug else logging.INFO
    uvicorn_logger = logging.getLogger("uvicorn")
    for logger_name in APP_LOGGERS:
        app_logger = logging.getLogger(logger_name)
        app_logger.setLevel(level)
        if not app_logger.handlers and uvicorn_logger.handlers:
            app_logger.addHandler(uvicorn_logger.handlers[0])


def _mount_single_page_app(app: FastAPI, static_dir: str) -> None:
    root = Path(static_dir).resolve()
    index = root / "index.html"

    @app.get("/{full_path:path}", include_in_schema=False)
    def single_page_app(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            return JSONResponse(status_code=404, content={"error": "Not found"})

        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        if index.is_file():
            return FileResponse(index)
        return JSONResponse(status_code=404, content={"error": "Not found"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application for one deployment mode.

    Args:
        settings: Configuration (defaults to environment settings)

    Raises:
        ConfigurationException: If the selected auth mode is misconfigured
    """
    settings = settings or get_settings()
    authenticator = build_authenticator(settings)

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.state.settings = settings
    app.state.authenticator = authenticator

    @app.on_event("startup")
    def on_startup():
        _configure_logging(settings.debug)
        logger.info(f"Starting {settings.app_name} in '{settings.auth_mode}' auth mode")
        init_db(settings=settings)

    @app.on_event("shutdown")
    def on_shutdown():
        close_db()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if settings.auth_mode == AUTH_MODE_SESSION:
        app.add_middleware(
            SessionMiddleware,
            secret_key=settings.session_secret,
            max_age=settings.session_max_age,
            https_only=settings.session_https_only,
            same_site="lax",
        )

    register_error_handlers(app)

    gate = [Depends(get_current_user)]
    app.include_router(events_router, prefix="/api", dependencies=gate)
    app.include_router(categories_router, prefix="/api", dependencies=gate)
    app.include_router(health_router, prefix="/api")
    if settings.auth_mode == AUTH_MODE_SESSION:
        app.include_router(auth_router, prefix="/api")

    if settings.static_dir:
        _mount_single_page_app(app, settings.static_dir)
    else:
        @app.get("/")
        def root():
            return {"message": f"{settings.app_name} is running"}

    return app


if __name__ == "__main__":
    import os

    # Determine environment mode
    env = os.getenv("ENVIRONMENT", "development").lower()
    port = int(os.getenv("PORT", "3000"))

    if env == "production":
        # Production: Multiple workers, no reload
        uvicorn.run("calendar_backend.main:create_app", factory=True, host="0.0.0.0", port=port, workers=4)
    else:
        # Development: Single worker with hot reload
        uvicorn.run("calendar_backend.main:create_app", factory=True, host="0.0.0.0", port=port, reload=True)
