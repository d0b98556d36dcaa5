import logging

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ai_cofounder.api_models import ErrorResponse
from ai_cofounder.dependencies import AppClients, Settings
from ai_cofounder.metrics import metrics_endpoint
from ai_cofounder.routers import auth, canvas, chat, health, projects, search

log = logging.getLogger("ai_cofounder")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level, logging.INFO)),
    )


def create_app(settings: Settings | None = None, clients: AppClients | None = None) -> FastAPI:
    """Build the API. Clients are created at startup unless passed in (tests)."""
    settings = settings or Settings.from_env()
    _configure_logging(settings.log_level)

    app = FastAPI(
        title="AI Co-founder API",
        description="Chat with an AI co-founder that sketches on a shared canvas.",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.clients = clients

    # --- Add Middleware ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Routers ---
    app.include_router(auth.router, prefix="/api")
    app.include_router(chat.router, prefix="/api")
    app.include_router(search.router, prefix="/api")
    app.include_router(health.router, prefix="/api")
    app.include_router(canvas.router, prefix="/api")
    app.include_router(projects.router, prefix="/api")

    # --- Root Endpoint & Metrics ---
    app.add_route("/metrics", metrics_endpoint, methods=["GET"])

    @app.get("/", tags=["Root"])
    async def read_root():
        return {"message": "Welcome to the AI Co-founder API!"}

    # --- Global Exception Handlers ---
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        err = ErrorResponse(error_message=str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=err.model_dump(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        err = ErrorResponse(error_code="invalid_request", error_message=str(exc.errors()))
        return JSONResponse(status_code=422, content=err.model_dump())

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        log.exception("Unhandled exception on %s %s", request.method, request.url.path)
        err = ErrorResponse(error_code="internal_error", error_message="Internal server error")
        return JSONResponse(status_code=500, content=err.model_dump())

    # --- Startup / Shutdown ---
    @app.on_event("startup")
    async def _build_clients():
        if app.state.clients is None:
            app.state.clients = AppClients.from_settings(settings)
            log.info(
                "Clients configured: supabase=%s openai=%s qdrant=%s auth=%s",
                app.state.clients.supabase is not None,
                app.state.clients.openai is not None,
                app.state.clients.qdrant is not None,
                settings.auth_strategy,
            )

    @app.on_event("shutdown")
    async def _close_clients():
        """Ensure async clients are closed gracefully."""
        clients = app.state.clients
        if clients is None:
            return
        try:
            await clients.aclose()
        except Exception as exc:
            log.warning("Failed to close clients on shutdown: %s", exc)

    return app


# To run the API: uvicorn ai_cofounder.api:app --reload --port 8001
app = create_app()
