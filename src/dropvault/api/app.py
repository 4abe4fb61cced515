"""FastAPI application factory."""
from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel
from dropvault import __version__
from dropvault.config import settings
from dropvault.domain.exceptions import AuthError, ConflictError, NotFoundError, SizeLimitExceeded
from dropvault.logging import logger


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from dropvault.infra.db.engine import engine  # triggers pragmas + mapper registration
        SQLModel.metadata.create_all(engine)
        logger.info("DropVault API ready (data dir: %s)", settings.data_dir)
        yield

    app = FastAPI(
        title="DropVault API",
        version=__version__,
        lifespan=lifespan,
    )

    # Import routers inside create_app() to avoid circular imports at module load time
    from dropvault.api.routers.auth import router as auth_router
    from dropvault.api.routers.files import router as files_router

    app.include_router(auth_router)
    app.include_router(files_router)

    @app.exception_handler(NotFoundError)
    def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(ConflictError)
    def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.message})

    @app.exception_handler(AuthError)
    def _unauthorized(request: Request, exc: AuthError) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={"detail": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(SizeLimitExceeded)
    def _too_large(request: Request, exc: SizeLimitExceeded) -> JSONResponse:
        return JSONResponse(status_code=413, content={"detail": exc.message, "name": exc.name})

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok"}

    return app
