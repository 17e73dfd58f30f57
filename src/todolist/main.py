from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import StoreUnavailableError
from .repositories import TodoService
from .routers import todos as todos_router
from .runtime import TodoRuntime
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
]


def configure_logging(level: str = "INFO") -> None:
    """Attach a console handler to the root logger at the given level."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, store: Optional[TodoService] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use; read from the environment when omitted.
        store: Store to serve from; built from settings when omitted.
    """
    settings = settings or get_settings()
    runtime = TodoRuntime(settings, store=store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        runtime.startup()
        yield
        runtime.shutdown()

    app = FastAPI(
        title="Todo List",
        description="Todo list service with pluggable Redis, SQLite and in-memory storage.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.runtime = runtime

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["x-requested-with", "origin", "content-type", "accept"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Reject malformed bodies and path parameters with 400.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=400,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": jsonable_errors(exc),
            },
        )

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=503, content={"detail": "Persistence service unavailable"})

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and the configured backend.
        """
        return {"message": "Healthy", "backend": runtime.store.backend}

    app.include_router(todos_router.router)
    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the raw 'ctx'/'input' values, which may not be JSON serializable."""
    return [{k: v for k, v in err.items() if k not in ("ctx", "input")} for err in exc.errors()]


app = create_app()


# PUBLIC_INTERFACE
def run() -> None:
    """Start the HTTP server on the configured host and port."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.http_host, port=settings.http_port)


if __name__ == "__main__":
    run()
