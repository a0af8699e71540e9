"""Persistence API endpoints: store document, saved entries and images."""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from ..models.storage import (
    SaveChatRequest, SaveDashboardRequest, SaveGeneratedImageRequest,
    SaveSustainabilityRequest, SaveVisionRequest,
)
from ..services.storage_service import StoreService
from .dependencies import get_store_service

router = APIRouter(prefix="/api/data", tags=["persistence"])


@router.get("")
def load_store(store: StoreService = Depends(get_store_service)) -> Dict[str, Any]:
    """Load the entire store document."""
    return store.load()


@router.get("/stats")
def get_store_stats(store: StoreService = Depends(get_store_service)):
    """Entry counts per collection and storage sizes."""
    return store.get_stats()


@router.post("/generated-image")
def save_generated_image(body: SaveGeneratedImageRequest,
                         store: StoreService = Depends(get_store_service)):
    """Save a generated or uploaded image without analysis."""
    return store.save_generated_image(body.camera_name, body.image_data)


@router.post("/vision")
def save_vision_analysis(body: SaveVisionRequest,
                         store: StoreService = Depends(get_store_service)):
    """Save an image analysis together with its image, if one was sent."""
    return store.save_vision_analysis(
        camera_name=body.camera_name,
        image_data=body.image_data,
        task=body.task,
        result=body.result.model_dump(mode="json"),
    )


@router.post("/chat")
def save_chat_session(body: SaveChatRequest,
                      store: StoreService = Depends(get_store_service)):
    """Create a chat session or update the messages of an existing one."""
    messages = [message.to_document() for message in body.messages]
    return store.upsert_chat_session(body.id, messages)


@router.post("/sustainability")
def save_sustainability_report(body: SaveSustainabilityRequest,
                               store: StoreService = Depends(get_store_service)):
    charts = [chart.to_document() for chart in body.charts] if body.charts else []
    return store.save_sustainability_report(body.input_data, body.report, charts)


@router.post("/dashboard")
def save_dashboard_snapshot(body: SaveDashboardRequest,
                            store: StoreService = Depends(get_store_service)):
    return store.save_dashboard_snapshot(
        insights=[insight.to_document() for insight in body.insights or []],
        charts=[chart.to_document() for chart in body.charts or []],
        stats=body.stats,
        text=body.text,
    )


@router.get("/images/{filename}")
def get_image(filename: str, store: StoreService = Depends(get_store_service)):
    """Serve a stored image file by name."""
    return FileResponse(store.get_image_path(filename), media_type="image/png")


@router.delete("/{collection}/{entry_id}")
def delete_entry(collection: str, entry_id: str,
                 store: StoreService = Depends(get_store_service)):
    """Delete an entry and the image file it owns, if any."""
    store.delete_entry(collection, entry_id)
    return {"success": True}
