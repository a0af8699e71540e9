"""Request and response models for the AI gateway endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .storage import StoreModel


class GenerateImageRequest(BaseModel):
    prompt: str = Field(..., min_length=1)


class AnalyzeImageRequest(StoreModel):
    image_data: str
    task: str


class StoreInsightsRequest(BaseModel):
    query: str = Field(..., min_length=1)
    context: Dict[str, Any] = Field(default_factory=dict)


class SustainabilityReportRequest(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict)


class DashboardInsightsRequest(BaseModel):
    stats: Optional[Dict[str, Any]] = None


class GeneratedImageResult(BaseModel):
    image: Optional[str] = None
    error: Optional[str] = None


class AnalysisResult(BaseModel):
    """Image analysis reply; extra keys from the model are passed through."""
    model_config = {"extra": "allow"}

    objects: List[Dict[str, Any]] = Field(default_factory=list)
    summary: str = ""
    charts: List[Dict[str, Any]] = Field(default_factory=list)


class InsightsResult(BaseModel):
    text: str = ""
    charts: List[Dict[str, Any]] = Field(default_factory=list)


class DashboardInsightsResult(InsightsResult):
    insights: List[Dict[str, Any]] = Field(default_factory=list)
