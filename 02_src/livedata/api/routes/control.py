"""Control API routes."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import IApplication


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


class BroadcasterStatusResponse(BaseModel):
    """Response model for broadcaster state."""

    running: bool
    topic: str
    interval_seconds: float
    published_count: int
    subscriber_count: int


def create_control_router(app: IApplication) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api/control", tags=["control"])

    @router.get("/broadcaster", response_model=BroadcasterStatusResponse)
    async def broadcaster_status() -> dict:
        """Current broadcaster state."""
        try:
            service = app.live_data_service
            return {
                "running": service.running,
                "topic": service.topic,
                "interval_seconds": service.interval,
                "published_count": service.published_count,
                "subscriber_count": app.broker.subscriber_count(service.topic),
            }
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/broadcaster/start", response_model=StatusResponse)
    async def start_broadcaster() -> dict:
        """Start publishing live data."""
        try:
            await app.live_data_service.start()
            return {"status": "ok"}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/broadcaster/stop", response_model=StatusResponse)
    async def stop_broadcaster() -> dict:
        """Stop publishing live data."""
        try:
            await app.live_data_service.stop()
            return {"status": "ok"}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
