"""AI gateway API endpoints backed by Gemini."""

from fastapi import APIRouter, Depends

from ..models.gemini import (
    AnalysisResult, AnalyzeImageRequest, DashboardInsightsRequest, DashboardInsightsResult,
    GenerateImageRequest, GeneratedImageResult, InsightsResult, StoreInsightsRequest,
    SustainabilityReportRequest,
)
from ..services.gemini_service import GeminiService
from .dependencies import get_gemini_service

router = APIRouter(prefix="/api", tags=["gemini"])


@router.post("/generate-image", response_model=GeneratedImageResult)
async def generate_image(body: GenerateImageRequest,
                         gemini: GeminiService = Depends(get_gemini_service)):
    """Generate a synthetic camera image from a text prompt."""
    return await gemini.generate_image(body.prompt)


@router.post("/analyze-image", response_model=AnalysisResult)
async def analyze_image(body: AnalyzeImageRequest,
                        gemini: GeminiService = Depends(get_gemini_service)):
    """Analyze a camera image: bounding boxes, summary and charts."""
    return await gemini.analyze_image(body.image_data, body.task)


@router.post("/store-insights", response_model=InsightsResult)
async def store_insights(body: StoreInsightsRequest,
                         gemini: GeminiService = Depends(get_gemini_service)):
    """Context-aware assistant answer for the store manager."""
    return await gemini.store_insights(body.query, body.context)


@router.post("/sustainability-report", response_model=InsightsResult)
async def sustainability_report(body: SustainabilityReportRequest,
                                gemini: GeminiService = Depends(get_gemini_service)):
    return await gemini.sustainability_report(body.data)


@router.post("/dashboard-insights", response_model=DashboardInsightsResult)
async def dashboard_insights(body: DashboardInsightsRequest,
                             gemini: GeminiService = Depends(get_gemini_service)):
    return await gemini.dashboard_insights(body.stats)
