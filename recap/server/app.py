"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recap.config import AppConfig, load_config
from recap.pipeline.services import PipelineServices, build_services
from recap.server.errors import register_error_handlers
from recap.server.routes import router


def create_app(config: AppConfig | None = None, *, services: PipelineServices | None = None) -> FastAPI:
    """Builds the API application around explicitly passed configuration and services."""
    config = config if config is not None else load_config()
    services = services if services is not None else build_services(config)

    app = FastAPI(title="Recap Service")
    app.state.config = config
    app.state.services = services
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.server.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    return app
