"""Abstract base class for generative model adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class InlineImage:
    """Binary image sent to, or received from, the model."""
    data: bytes
    mime_type: str = "image/png"


@dataclass
class ModelReply:
    """Normalized reply of one model call."""
    text: Optional[str] = None
    images: List[InlineImage] = field(default_factory=list)
    has_candidates: bool = True


class ModelAdapter(ABC):
    """Abstract base class for generative model adapters."""

    @abstractmethod
    async def generate_json(
        self,
        prompt: str,
        model: str,
        images: Optional[List[InlineImage]] = None
    ) -> ModelReply:
        """Ask the model for a JSON reply to a prompt and optional images."""
        pass

    @abstractmethod
    async def generate_image(self, prompt: str, model: str, aspect_ratio: str = "16:9") -> ModelReply:
        """Ask the model to draw an image for a prompt."""
        pass
