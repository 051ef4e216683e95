import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from supabase import Client

from pushdeploy.config.settings import Settings, settings as default_settings
from pushdeploy.core.errors import PushDeployError
from pushdeploy.database.supabase_client import create_supabase
from pushdeploy.modules.deployments.dispatch import MISSING_OWNER_OR_REPO
from pushdeploy.modules.deployments import routes as deployments_routes
from pushdeploy.modules.webhooks import routes as webhooks_routes

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


def _is_webhook(request: Request) -> bool:
    # GitHub reads plain text; the dashboard reads {"error": ...}
    return request.url.path.startswith("/webhook")


def _error_response(request: Request, status_code: int, message: str):
    if _is_webhook(request):
        if status_code == 401:
            return Response(status_code=401)
        return PlainTextResponse(message, status_code=status_code)
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    settings: Optional[Settings] = None,
    supabase: Optional[Client] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the application. Clients passed in are used as-is and left open;
    missing ones are created on startup and closed on shutdown.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup")
        logger.info(
            "GitHub token: %s, webhook secret: %s",
            "set" if settings.github_token else "not set",
            "set" if settings.github_webhook_secret else "not set",
        )
        owned_http_client = None
        if app.state.http_client is None:
            owned_http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
            app.state.http_client = owned_http_client
        if app.state.supabase is None:
            try:
                app.state.supabase = create_supabase(settings)
            except PushDeployError as e:
                # Reads and webhook writes answer 500 until Supabase is configured
                logger.error(f"Supabase client not created: {e.message}")
        try:
            yield
        finally:
            if owned_http_client is not None:
                await owned_http_client.aclose()
            logger.info("Application shutdown")

    limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.supabase = supabase
    app.state.http_client = http_client
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(PushDeployError)
    async def pushdeploy_exception_handler(request: Request, exc: PushDeployError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return _error_response(request, exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # /deploy is the only route with a body; anything but a JSON object lacks owner and repo
        message = MISSING_OWNER_OR_REPO if request.url.path == "/deploy" else "Invalid request"
        return _error_response(request, 400, message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        if settings.is_production:
            return _error_response(request, 500, "Internal Server Error")
        return _error_response(request, 500, str(exc))

    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(deployments_routes.router)
    app.include_router(webhooks_routes.router)

    @app.get("/")
    async def root():
        return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}

    @app.get("/health")
    @limiter.exempt
    async def health():
        return {"status": "healthy"}

    @app.get("/ready")
    @limiter.exempt
    async def ready(request: Request):
        """Readiness probe: Supabase client constructed"""
        if request.app.state.supabase is None:
            return JSONResponse(status_code=503, content={"status": "not ready"})
        return {"status": "ready"}

    return app


configure_logging(default_settings)
app = create_app()
