"""FastAPI dependencies providing the shared service instances."""

from functools import lru_cache

from fastapi import Depends

from ..services.gemini_adapter import GeminiAdapter
from ..services.gemini_service import GeminiService
from ..services.storage_service import StoreService


@lru_cache
def get_store_service() -> StoreService:
    """Process-wide store service."""
    return StoreService()


@lru_cache
def get_model_adapter() -> GeminiAdapter:
    return GeminiAdapter()


def get_gemini_service(
    store: StoreService = Depends(get_store_service),
    adapter: GeminiAdapter = Depends(get_model_adapter),
) -> GeminiService:
    """FastAPI dependency building the AI gateway around the shared adapter."""
    return GeminiService(adapter=adapter, store=store)
