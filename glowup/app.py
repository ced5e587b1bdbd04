"""Application factory for the GlowUp FastAPI backend."""

from functools import partial

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .llm import Invoker, invoke
from .logging import configure_logging
from .memory import SessionMemory
from .routers import artifacts


def create_app(settings: Settings | None = None, invoker: Invoker | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance.

    *invoker* replaces the Anthropic client, e.g. with a stub in tests.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    app = FastAPI(
        title="GlowUp Backend",
        version="0.1.0",
        description="AI-generated investor shortlists, pitch decks and market research for founders.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_origin_regex=r"http://localhost:\d+$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )
    app.state.settings = settings
    app.state.sessions = SessionMemory(
        invoker=invoker or partial(invoke, settings=settings),
        default_credential=settings.anthropic_api_key,
    )
    app.include_router(artifacts.router)
    return app


app = create_app()
