"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app import Application
from .routes import control, live_data, websocket


def create_fastapi_app(application: Application) -> FastAPI:
    """Create and configure FastAPI application around a not yet started Application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="Live Data API",
        description="Broadcasts live samples over STOMP/WebSocket",
        version="0.1.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=application.settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    fastapi_app.include_router(websocket.create_websocket_router(application))
    fastapi_app.include_router(live_data.create_live_data_router(application))
    fastapi_app.include_router(control.create_control_router(application))

    return fastapi_app
