"""
Application entrypoint.

``create_app`` configures logging, builds the JSON store, mounts the routers
and installs the exception handlers that turn domain errors into
``{"error": ...}`` bodies.
Run with::

    uvicorn golf_league.main:app --reload
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from golf_league.core.config import settings
from golf_league.core.exceptions import GolfLeagueError
from golf_league.core.json_store import JsonStore
from golf_league.core.logging_config import setup_logging
from golf_league.routes import foursome_routes, playgroup_routes, score_routes, session_routes, user_routes

logger = logging.getLogger(__name__)


def golf_league_error_handler(request: Request, exc: GolfLeagueError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected (%d): %s", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(status_code=400, content={"error": f"{field}: {message}" if field else message})


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(store: Optional[JsonStore] = None) -> FastAPI:
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE or None)

    app = FastAPI(title=settings.PROJECT_NAME)
    # One store per app: all requests share its lock.
    app.state.store = store or JsonStore(settings.DATA_DIR)

    app.add_exception_handler(GolfLeagueError, golf_league_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(user_routes.router, prefix="/users", tags=["Users"])
    app.include_router(playgroup_routes.router, prefix="/playgroups", tags=["Playgroups"])
    app.include_router(session_routes.router, prefix="/sessions", tags=["Sessions"])
    app.include_router(foursome_routes.router, prefix="/foursomes", tags=["Foursomes"])
    app.include_router(score_routes.router, prefix="/scores", tags=["Scores"])

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("golf_league.main:app", host="0.0.0.0", port=8000, reload=True)
