"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app import Application
from .routes import messaging, observability, slack, websocket


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure the FastAPI application around ``application``."""
    application = application or Application()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="Conversation Relay API",
        description="Relays chat messages to a dialog service",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.application = application

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fastapi_app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    fastapi_app.include_router(messaging.create_messaging_router(application))
    fastapi_app.include_router(websocket.create_websocket_router(application))
    fastapi_app.include_router(slack.create_slack_router(application))
    fastapi_app.include_router(observability.create_observability_router(application))

    return fastapi_app
