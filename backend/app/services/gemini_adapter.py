"""Gemini (Vertex AI) model adapter implementation."""

import logging
from typing import List, Optional

from google import genai
from google.genai import types

from ..config import settings
from .model_adapter import InlineImage, ModelAdapter, ModelReply

logger = logging.getLogger(__name__)


class GeminiAdapter(ModelAdapter):
    """Gemini adapter using the google-genai SDK against Vertex AI."""

    def __init__(self, project: Optional[str] = None, location: Optional[str] = None):
        self.project = project if project is not None else settings.google_cloud_project
        self.location = location or settings.google_cloud_location
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        # Created on first use so that importing the app needs no credentials
        if self._client is None:
            self._client = genai.Client(
                vertexai=True,
                project=self.project or None,
                location=self.location,
            )
            logger.info(f"Gemini client ready (project={self.project or '<default>'}, location={self.location})")
        return self._client

    async def generate_json(
        self,
        prompt: str,
        model: str,
        images: Optional[List[InlineImage]] = None
    ) -> ModelReply:
        """Generate a JSON reply using the Gemini API."""
        parts = [types.Part.from_text(text=prompt)]
        for image in images or []:
            parts.append(types.Part.from_bytes(data=image.data, mime_type=image.mime_type))

        response = await self.client.aio.models.generate_content(
            model=model,
            contents=[types.Content(role="user", parts=parts)],
            config=types.GenerateContentConfig(response_mime_type="application/json"),
        )
        return self._to_reply(response)

    async def generate_image(self, prompt: str, model: str, aspect_ratio: str = "16:9") -> ModelReply:
        """Generate an image using the Gemini API."""
        response = await self.client.aio.models.generate_content(
            model=model,
            contents=[types.Content(role="user", parts=[types.Part.from_text(text=prompt)])],
            config=types.GenerateContentConfig(
                response_modalities=["TEXT", "IMAGE"],
                image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
            ),
        )
        return self._to_reply(response)

    def _to_reply(self, response: types.GenerateContentResponse) -> ModelReply:
        candidates = response.candidates or []
        if not candidates:
            return ModelReply(text=None, has_candidates=False)

        texts: List[str] = []
        images: List[InlineImage] = []
        content = candidates[0].content
        for part in (content.parts if content and content.parts else []):
            if part.inline_data and part.inline_data.data:
                images.append(InlineImage(
                    data=part.inline_data.data,
                    mime_type=part.inline_data.mime_type or "image/png",
                ))
            elif part.text and not part.thought:
                texts.append(part.text)

        return ModelReply(text="".join(texts) if texts else None, images=images)
