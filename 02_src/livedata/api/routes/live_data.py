"""Live data read API routes."""

from datetime import datetime

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import IApplication


class LiveDataResponse(BaseModel):
    """Response model for a live data sample."""

    value: float
    timestamp: datetime


def create_live_data_router(app: IApplication) -> APIRouter:
    """Create live data router."""
    router = APIRouter(prefix="/api/live-data", tags=["live-data"])

    @router.get("/latest", response_model=LiveDataResponse)
    async def get_latest() -> dict:
        """Most recently broadcast sample."""
        try:
            latest = app.live_data_service.latest
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if latest is None:
            raise HTTPException(status_code=404, detail="No live data published yet")
        return {"value": latest.value, "timestamp": latest.timestamp}

    return router
