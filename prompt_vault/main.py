from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from prompt_vault import __version__
from prompt_vault.api.endpoints import router
from prompt_vault.config import Settings
from prompt_vault.errors import NotFoundError, StorageError, ValidationError
from prompt_vault.services import PromptStore, QueryEngine
import logging
import os
import uvicorn

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI):
    """Map store errors onto HTTP responses."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Internal storage error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the prompt store on startup and close it on shutdown."""
        store = PromptStore.open(settings.database_url, echo=settings.sql_echo)
        app.state.store = store
        app.state.query_engine = QueryEngine(store)
        try:
            yield
        finally:
            store.close()
            logger.info("Prompt store closed")

    app = FastAPI(
        title="Prompt Vault",
        description="Personal library for storing, tagging and reusing prompts",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routes
    app.include_router(router, prefix="/api")

    static_dir = settings.static_dir
    index_file = os.path.join(static_dir, "index.html")

    @app.get("/")
    async def root():
        """Serve web UI."""
        if os.path.exists(index_file):
            return FileResponse(index_file)

        # Fallback to JSON response if UI not available
        return {
            "message": "Prompt Vault",
            "version": __version__,
            "docs": "/docs",
        }

    # Serve the built web UI from the root, falling back to index.html for client routes
    if os.path.exists(index_file):
        static_root = os.path.realpath(static_dir)

        @app.get("/{full_path:path}", include_in_schema=False)
        async def web_ui(full_path: str):
            candidate = os.path.realpath(os.path.join(static_root, full_path))
            if candidate.startswith(static_root + os.sep) and os.path.isfile(candidate):
                return FileResponse(candidate)
            return FileResponse(index_file)

    return app


app = create_app()


if __name__ == "__main__":
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)
