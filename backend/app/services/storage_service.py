"""JSON-based persistence for saved analyses, chats, reports and images."""

import base64
import binascii
import json
import logging
import os
import re
import tempfile
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import settings
from ..models.storage import (
    COLLECTION_KEYS, IMAGE_COLLECTIONS, STORE_VERSION,
    ChatSession, DashboardSnapshot, GeneratedImage, SustainabilityReport,
    VisionAnalysis, empty_store, generate_id, utc_now_iso,
)
from .exceptions import (
    EntryNotFoundError, ImageNotFoundError, InvalidImageDataError,
    StorageError, UnknownCollectionError,
)
from .write_lock import WriteLock

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:image/\w+;base64,(.+)$", re.DOTALL)


def decode_data_uri(image_data: Optional[str]) -> Optional[bytes]:
    """Decode a ``data:image/<type>;base64,...`` URI, or return None."""
    if not image_data:
        return None
    match = DATA_URI_PATTERN.match(image_data)
    if not match:
        return None
    try:
        payload = "".join(match.group(1).split())
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None


def image_filename(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}.png"


class StoreService:
    """Service for the store document and the images it references.

    Every mutation is a full read-modify-write of the document, serialized
    through a write lock.
    """

    def __init__(self, data_dir: Optional[str] = None, lock: Optional[WriteLock] = None):
        self.data_dir = Path(data_dir or settings.data_dir)
        self.images_dir = self.data_dir / "images"
        self.store_file = self.data_dir / "store.json"
        self.lock = lock or WriteLock(directory=str(self.data_dir / ".lock"))

    def _ensure_dirs(self):
        try:
            self.images_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create data directory {self.data_dir}: {e}")
            raise StorageError("Falha ao acessar o armazenamento de dados.") from e

    def _read_store(self) -> Dict[str, Any]:
        """Read the document, creating it when absent and filling missing keys."""
        self._ensure_dirs()
        if not self.store_file.exists():
            store = empty_store()
            self._write_store(store)
            logger.info(f"Created empty store at {self.store_file}")
            return store

        try:
            with open(self.store_file, "r", encoding="utf-8") as f:
                store = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read store {self.store_file}: {e}")
            raise StorageError("Falha ao ler os dados salvos.") from e

        if not isinstance(store, dict):
            logger.error(f"Store {self.store_file} is not a JSON object")
            raise StorageError("Falha ao ler os dados salvos.")

        store.setdefault("version", STORE_VERSION)
        for key in COLLECTION_KEYS.values():
            if not isinstance(store.get(key), list):
                store[key] = []
        return store

    def _write_store(self, store: Dict[str, Any]):
        """Write the whole document atomically (temp file + rename)."""
        self._ensure_dirs()
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=str(self.data_dir), prefix=".store-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(store, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.store_file)
        except OSError as e:
            logger.error(f"Cannot write store {self.store_file}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError("Falha ao salvar os dados.") from e

    def _write_image(self, prefix: str, content: bytes) -> str:
        filename = image_filename(prefix)
        try:
            with open(self.images_dir / filename, "wb") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Cannot write image {filename}: {e}")
            raise StorageError("Falha ao salvar a imagem.") from e
        return filename

    def load(self) -> Dict[str, Any]:
        """Load the entire store document."""
        with self.lock.hold():
            return self._read_store()

    def save_generated_image(self, camera_name: str, image_data: Optional[str]) -> Dict[str, Any]:
        """Store a generated or uploaded image. The payload must be a valid data URI."""
        content = decode_data_uri(image_data)
        if content is None:
            raise InvalidImageDataError("Nenhuma imagem válida foi enviada.")

        with self.lock.hold():
            store = self._read_store()
            image_file = self._write_image("gen", content)
            entry = GeneratedImage(camera_name=camera_name, image_file=image_file).to_document()
            store["generatedImages"].insert(0, entry)
            self._write_store(store)

        logger.info(f"Saved generated image {entry['id']} ({image_file})")
        return entry

    def save_vision_analysis(self, camera_name: str, image_data: Optional[str],
                             task: str, result: Dict[str, Any]) -> Dict[str, Any]:
        """Store an analysis; an unusable image payload is stored as a null file."""
        content = decode_data_uri(image_data)
        if image_data and content is None:
            logger.warning("Vision analysis image payload is not a data URI; saving without image")

        with self.lock.hold():
            store = self._read_store()
            image_file = self._write_image("img", content) if content is not None else None
            entry = VisionAnalysis(
                camera_name=camera_name,
                image_file=image_file,
                task=task,
                result=result,
            ).to_document()
            store["visionAnalyses"].insert(0, entry)
            self._write_store(store)

        logger.info(f"Saved vision analysis {entry['id']}")
        return entry

    def upsert_chat_session(self, session_id: Optional[str], messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Create a chat session or replace the messages of an existing one."""
        with self.lock.hold():
            store = self._read_store()
            sessions = store["chatSessions"]
            now = utc_now_iso()

            index = next(
                (i for i, s in enumerate(sessions) if session_id and s.get("id") == session_id),
                None
            )
            if index is not None:
                started_at = sessions[index].get("startedAt") or now
            else:
                started_at = now

            session = ChatSession(
                id=session_id or generate_id("chat"),
                messages=messages,
                started_at=started_at,
                last_message_at=now,
            ).to_document()

            if index is not None:
                sessions[index] = session
            else:
                sessions.insert(0, session)
            self._write_store(store)

        logger.debug(f"Upserted chat session {session['id']} ({len(messages)} messages)")
        return session

    def save_sustainability_report(self, input_data: Any, report: str,
                                   charts: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        """Store a generated sustainability report."""
        entry = SustainabilityReport(
            input_data=input_data,
            report=report,
            charts=charts or [],
        ).to_document()
        with self.lock.hold():
            store = self._read_store()
            store["sustainabilityReports"].insert(0, entry)
            self._write_store(store)
        return entry

    def save_dashboard_snapshot(self, insights: Optional[List[Dict[str, Any]]] = None,
                                charts: Optional[List[Dict[str, Any]]] = None,
                                stats: Optional[Dict[str, Any]] = None,
                                text: Optional[str] = None) -> Dict[str, Any]:
        """Store a dashboard insights snapshot."""
        entry = DashboardSnapshot(
            insights=insights or [],
            charts=charts or [],
            stats=stats or {},
            text=text or "",
        ).to_document()
        with self.lock.hold():
            store = self._read_store()
            store["dashboardSnapshots"].insert(0, entry)
            self._write_store(store)
        return entry

    def delete_entry(self, collection: str, entry_id: str):
        """Delete an entry by public collection name and id, with its image file."""
        key = COLLECTION_KEYS.get(collection)
        if key is None:
            raise UnknownCollectionError(f"Coleção desconhecida: {collection}")

        with self.lock.hold():
            store = self._read_store()
            entries = store[key]
            index = next((i for i, item in enumerate(entries) if item.get("id") == entry_id), None)
            if index is None:
                raise EntryNotFoundError("Registro não encontrado.")

            image_file = entries[index].get("imageFile")
            if key in IMAGE_COLLECTIONS and image_file:
                self._remove_image(image_file)

            del entries[index]
            self._write_store(store)

        logger.info(f"Deleted {key} entry {entry_id}")

    def _remove_image(self, filename: str):
        path = self._safe_image_path(filename)
        if path is None:
            logger.warning(f"Refusing to delete image outside images dir: {filename!r}")
            return
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Cannot delete image {filename}: {e}")
            raise StorageError("Falha ao remover a imagem.") from e

    def _safe_image_path(self, filename: str) -> Optional[Path]:
        """Map a filename to a path inside the images directory, or None."""
        if not filename or filename.startswith(".") or "/" in filename or "\\" in filename or "\x00" in filename:
            return None
        images_dir = self.images_dir.resolve()
        path = (images_dir / filename).resolve()
        if path.parent != images_dir:
            return None
        return path

    def get_image_path(self, filename: str) -> Path:
        """Path of a stored image; raises ImageNotFoundError when absent."""
        path = self._safe_image_path(filename)
        if path is None or not path.is_file():
            raise ImageNotFoundError("Imagem não encontrada.")
        return path

    def read_image(self, filename: str) -> bytes:
        path = self.get_image_path(filename)
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error(f"Cannot read image {filename}: {e}")
            raise StorageError("Falha ao ler a imagem.") from e

    def get_stats(self) -> Dict[str, Any]:
        """Get storage statistics."""
        store = self.load()
        image_count = 0
        if self.images_dir.exists():
            image_count = sum(1 for p in self.images_dir.iterdir() if p.is_file())

        return {
            "collections": {key: len(store[key]) for key in COLLECTION_KEYS.values()},
            "images": image_count,
            "data_dir": str(self.data_dir),
            "store_file_size": self.store_file.stat().st_size if self.store_file.exists() else 0,
        }
