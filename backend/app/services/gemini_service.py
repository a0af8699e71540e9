"""AI gateway: prompt shaping, model calls and reply normalization."""

import base64
import binascii
import json
import logging
from typing import Any, Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from ..config import settings
from ..models.gemini import (
    AnalysisResult, DashboardInsightsResult, GeneratedImageResult, InsightsResult,
)
from .exceptions import (
    GeminiAPIError, ImageNotFoundError, InvalidImageReferenceError,
)
from .gemini_errors import classify_gemini_error, log_gemini_error
from .model_adapter import InlineImage, ModelAdapter, ModelReply
from .prompts import (
    ANALYZE_IMAGE_PROMPT, DASHBOARD_PROMPT, NO_ANALYSIS_SUMMARY, NO_CANDIDATES_ERROR,
    NO_IMAGE_ERROR, SAMPLE_DASHBOARD_STATS, STORE_INSIGHTS_PROMPT, SUSTAINABILITY_PROMPT,
    UNPARSABLE_ANALYSIS_SUMMARY,
)
from .storage_service import StoreService

logger = logging.getLogger(__name__)

STORED_IMAGE_PREFIX = "/api/data/images/"


def safe_parse_json(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse a JSON object out of a model reply, or return None."""
    if not raw:
        return None
    start = raw.find("{")
    end = raw.rfind("}")
    if start != -1 and end != -1 and end >= start:
        raw = raw[start : end + 1]
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def as_dict_list(value: Any) -> List[Dict[str, Any]]:
    """Only the JSON objects of a list; anything else becomes an empty list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


class GeminiService:
    """Service exposing one method per AI capability of the store assistant."""

    def __init__(self, adapter: ModelAdapter, store: StoreService,
                 text_model: Optional[str] = None,
                 fallback_text_model: Optional[str] = None,
                 image_model: Optional[str] = None):
        self.adapter = adapter
        self.store = store
        self.text_model = text_model or settings.text_model
        self.fallback_text_model = (
            settings.fallback_text_model if fallback_text_model is None else fallback_text_model
        )
        self.image_model = image_model or settings.image_model

    def _gemini_error(self, endpoint: str, error: Exception) -> GeminiAPIError:
        classified = classify_gemini_error(error)
        log_gemini_error(endpoint, error, classified)
        return GeminiAPIError(classified, error)

    async def _generate_text_json(self, endpoint: str, prompt: str) -> ModelReply:
        """Call the primary text model, falling back once to the secondary model."""
        models = [self.text_model]
        if self.fallback_text_model and self.fallback_text_model != self.text_model:
            models.append(self.fallback_text_model)

        last_error: Optional[Exception] = None
        for model in models:
            try:
                return await self.adapter.generate_json(prompt, model)
            except Exception as e:
                last_error = e
                if model != models[-1]:
                    logger.warning(f"{endpoint}: model {model} failed ({e}); retrying with {models[-1]}")
        raise self._gemini_error(endpoint, last_error)

    async def generate_image(self, prompt: str) -> GeneratedImageResult:
        """Generate a synthetic camera image from a text prompt."""
        try:
            reply = await self.adapter.generate_image(prompt, self.image_model)
        except Exception as e:
            raise self._gemini_error("generate-image", e)

        if not reply.has_candidates:
            return GeneratedImageResult(image=None, error=NO_CANDIDATES_ERROR)
        if not reply.images:
            return GeneratedImageResult(image=None, error=NO_IMAGE_ERROR)

        encoded = base64.b64encode(reply.images[0].data).decode("ascii")
        return GeneratedImageResult(image=f"data:image/png;base64,{encoded}")

    async def _resolve_image(self, image_data: str) -> InlineImage:
        """Turn a data URI or a stored image path into raw image bytes."""
        if image_data.startswith("data:"):
            header, _, payload = image_data.partition(",")
            payload = "".join(payload.split())
            mime_type = header[len("data:"):].split(";")[0] or "image/png"
            try:
                return InlineImage(data=base64.b64decode(payload, validate=True), mime_type=mime_type)
            except (binascii.Error, ValueError) as e:
                raise InvalidImageReferenceError("Formato de imagem não reconhecido.") from e

        if image_data.startswith(STORED_IMAGE_PREFIX):
            filename = image_data[len(STORED_IMAGE_PREFIX):]
            try:
                return InlineImage(data=await run_in_threadpool(self.store.read_image, filename))
            except ImageNotFoundError as e:
                raise InvalidImageReferenceError("Imagem não encontrada no servidor.") from e

        raise InvalidImageReferenceError("Formato de imagem não reconhecido.")

    async def analyze_image(self, image_data: str, task: str) -> AnalysisResult:
        """Detect objects, summarize and chart a camera image."""
        image = await self._resolve_image(image_data)
        prompt = ANALYZE_IMAGE_PROMPT.format(task=task)
        try:
            reply = await self.adapter.generate_json(prompt, self.text_model, images=[image])
        except Exception as e:
            raise self._gemini_error("analyze-image", e)

        if not reply.has_candidates:
            return AnalysisResult(summary=NO_ANALYSIS_SUMMARY)

        parsed = safe_parse_json(reply.text or "{}")
        if parsed is None:
            logger.warning("analyze-image: model reply is not valid JSON")
            return AnalysisResult(summary=UNPARSABLE_ANALYSIS_SUMMARY)

        parsed["objects"] = as_dict_list(parsed.get("objects"))
        parsed["charts"] = as_dict_list(parsed.get("charts"))
        parsed["summary"] = as_text(parsed.get("summary"))
        return AnalysisResult(**parsed)

    async def store_insights(self, query: str, context: Dict[str, Any]) -> InsightsResult:
        """Answer a manager's question using the current store context."""
        prompt = STORE_INSIGHTS_PROMPT.format(
            context=json.dumps(context, ensure_ascii=False), query=query
        )
        reply = await self._generate_text_json("store-insights", prompt)
        return self._insights_result(reply)

    async def sustainability_report(self, data: Dict[str, Any]) -> InsightsResult:
        """Narrated sustainability report from consumption data."""
        prompt = SUSTAINABILITY_PROMPT.format(data=json.dumps(data, ensure_ascii=False))
        reply = await self._generate_text_json("sustainability-report", prompt)
        return self._insights_result(reply)

    async def dashboard_insights(self, stats: Optional[Dict[str, Any]] = None) -> DashboardInsightsResult:
        """Actionable insights and charts for the dashboard."""
        prompt = DASHBOARD_PROMPT.format(
            stats=json.dumps(stats or SAMPLE_DASHBOARD_STATS, ensure_ascii=False)
        )
        reply = await self._generate_text_json("dashboard-insights", prompt)
        parsed = safe_parse_json(reply.text)
        if parsed is None:
            return DashboardInsightsResult(text=reply.text or "")
        return DashboardInsightsResult(
            text=as_text(parsed.get("text")),
            insights=as_dict_list(parsed.get("insights")),
            charts=as_dict_list(parsed.get("charts")),
        )

    def _insights_result(self, reply: ModelReply) -> InsightsResult:
        parsed = safe_parse_json(reply.text)
        if parsed is None:
            return InsightsResult(text=reply.text or "")
        return InsightsResult(
            text=as_text(parsed.get("text")),
            charts=as_dict_list(parsed.get("charts")),
        )
