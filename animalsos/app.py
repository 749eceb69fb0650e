"""FastAPI application factory for the AnimalSOS API."""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from animalsos.core.config import Settings, get_settings
from animalsos.core.logging import configure_logging
from animalsos.repositories import create_storage
from animalsos.repositories.base import Storage
from animalsos.routers import adoptions as adoptions_router
from animalsos.routers import auth as auth_router
from animalsos.routers import donations as donations_router
from animalsos.routers import posts as posts_router
from animalsos.routers import reports as reports_router
from animalsos.routers import users as users_router
from animalsos.routers import vets as vets_router


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers on every API response."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def create_app(settings: Settings | None = None, storage: Storage | None = None) -> FastAPI:
    """Build the API around one storage backend.

    ``storage`` is created from ``settings`` when not supplied, which is the
    single place the backend gets chosen for the process.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    storage = storage or create_storage(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage.session_store.start_pruning()
        try:
            yield
        finally:
            storage.close()

    app = FastAPI(title="AnimalSOS API", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage

    allowed_cors = {origin for origin in settings.cors_origins if origin}
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    @app.get("/api/health")
    def health():
        return {"ok": True, "storage": storage.backend_name}

    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    app.include_router(reports_router.router)
    app.include_router(vets_router.router)
    app.include_router(adoptions_router.router)
    app.include_router(donations_router.router)
    app.include_router(posts_router.router)
    return app
