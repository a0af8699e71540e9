"""Data models for the JSON store document."""

import time
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


STORE_VERSION = 1


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_id(prefix: str) -> str:
    """Create an entry id of the form ``{prefix}_{epoch_ms}_{suffix}``."""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


class StoreModel(BaseModel):
    """Base model: snake_case in Python, camelCase on disk and on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=False)


class ChartType(str, Enum):
    """Chart kinds the frontend knows how to render."""
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    AREA = "area"


class ChartSpec(StoreModel):
    """A chart description produced by the model."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    type: str = ChartType.BAR.value
    title: str = ""
    data: List[Dict[str, Any]] = Field(default_factory=list)


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(StoreModel):
    """A single chat turn."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    role: ChatRole
    content: str
    charts: Optional[List[Dict[str, Any]]] = None
    timestamp: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class InsightType(str, Enum):
    OPPORTUNITY = "opportunity"
    ALERT = "alert"
    INFO = "info"


class DashboardInsight(StoreModel):
    type: str = InsightType.INFO.value
    title: str = ""
    description: str = ""


class VisionResult(StoreModel):
    """Outcome of an image analysis as returned by the AI gateway."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    objects: List[Dict[str, Any]] = Field(default_factory=list)
    summary: str = ""
    charts: List[Dict[str, Any]] = Field(default_factory=list)


class GeneratedImage(StoreModel):
    """Image cache entry with no analysis attached."""
    id: str = Field(default_factory=lambda: generate_id("genimg"))
    camera_name: str
    image_file: str
    timestamp: str = Field(default_factory=utc_now_iso)


class VisionAnalysis(StoreModel):
    """Saved image analysis; image_file is None when no image was stored."""
    id: str = Field(default_factory=lambda: generate_id("vision"))
    camera_name: str
    image_file: Optional[str] = None
    task: str
    result: Dict[str, Any]
    timestamp: str = Field(default_factory=utc_now_iso)


class ChatSession(StoreModel):
    """Chat session, upserted by id."""
    id: str = Field(default_factory=lambda: generate_id("chat"))
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    started_at: str = Field(default_factory=utc_now_iso)
    last_message_at: str = Field(default_factory=utc_now_iso)


class SustainabilityReport(StoreModel):
    id: str = Field(default_factory=lambda: generate_id("sust"))
    input_data: Any = None
    report: str = ""
    charts: List[Dict[str, Any]] = Field(default_factory=list)
    timestamp: str = Field(default_factory=utc_now_iso)


class DashboardSnapshot(StoreModel):
    id: str = Field(default_factory=lambda: generate_id("dash"))
    insights: List[Dict[str, Any]] = Field(default_factory=list)
    charts: List[Dict[str, Any]] = Field(default_factory=list)
    stats: Dict[str, Any] = Field(default_factory=dict)
    text: str = ""
    timestamp: str = Field(default_factory=utc_now_iso)


# Public collection name (URL segment) -> key inside the store document
COLLECTION_KEYS: Dict[str, str] = {
    "generated-images": "generatedImages",
    "vision": "visionAnalyses",
    "chat": "chatSessions",
    "sustainability": "sustainabilityReports",
    "dashboard": "dashboardSnapshots",
}

# Collections whose entries may own a file in the images directory
IMAGE_COLLECTIONS = {"generatedImages", "visionAnalyses"}


def empty_store() -> Dict[str, Any]:
    """A fully keyed store document with empty collections."""
    store: Dict[str, Any] = {"version": STORE_VERSION}
    for key in COLLECTION_KEYS.values():
        store[key] = []
    return store


# Request bodies

class SaveGeneratedImageRequest(StoreModel):
    camera_name: str
    image_data: Optional[str] = None


class SaveVisionRequest(StoreModel):
    camera_name: str
    image_data: Optional[str] = None
    task: str
    result: VisionResult


class SaveChatRequest(StoreModel):
    id: Optional[str] = None
    messages: List[ChatMessage] = Field(default_factory=list)


class SaveSustainabilityRequest(StoreModel):
    input_data: Any = None
    report: str = ""
    charts: Optional[List[ChartSpec]] = None


class SaveDashboardRequest(StoreModel):
    insights: Optional[List[DashboardInsight]] = None
    charts: Optional[List[ChartSpec]] = None
    stats: Optional[Dict[str, Any]] = None
    text: Optional[str] = None
