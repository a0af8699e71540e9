"""Tests for the JSON store service."""

import json

import pytest

from app.models.storage import COLLECTION_KEYS
from app.services.exceptions import (
    EntryNotFoundError, ImageNotFoundError, InvalidImageDataError,
    StorageError, UnknownCollectionError,
)
from fakes import PNG_1X1_BYTES, PNG_1X1_DATA_URI


def image_files(store):
    if not store.images_dir.exists():
        return []
    return sorted(p.name for p in store.images_dir.iterdir())


def test_load_creates_empty_store(store):
    data = store.load()

    assert data["version"] == 1
    for key in COLLECTION_KEYS.values():
        assert data[key] == []
    assert store.store_file.exists()
    assert store.images_dir.is_dir()


def test_load_injects_missing_collection_without_persisting(store):
    store.data_dir.mkdir(parents=True, exist_ok=True)
    legacy = {
        "version": 1,
        "visionAnalyses": [{"id": "vision_1", "imageFile": None}],
        "chatSessions": [],
        "sustainabilityReports": [],
        "dashboardSnapshots": [],
    }
    store.store_file.write_text(json.dumps(legacy), encoding="utf-8")

    data = store.load()

    assert data["generatedImages"] == []
    assert data["visionAnalyses"] == [{"id": "vision_1", "imageFile": None}]
    on_disk = json.loads(store.store_file.read_text(encoding="utf-8"))
    assert "generatedImages" not in on_disk


def test_migrated_shape_is_persisted_on_next_write(store):
    store.data_dir.mkdir(parents=True, exist_ok=True)
    store.store_file.write_text(json.dumps({"version": 1, "chatSessions": []}), encoding="utf-8")

    store.save_dashboard_snapshot(text="ok")

    on_disk = json.loads(store.store_file.read_text(encoding="utf-8"))
    for key in COLLECTION_KEYS.values():
        assert key in on_disk


def test_corrupt_store_raises_storage_error(store):
    store.data_dir.mkdir(parents=True, exist_ok=True)
    store.store_file.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        store.load()


def test_save_generated_image_writes_one_file_and_prepends(store):
    first = store.save_generated_image("Balcão", PNG_1X1_DATA_URI)
    second = store.save_generated_image("Estoque", PNG_1X1_DATA_URI)

    assert second["id"].startswith("genimg_")
    assert second["cameraName"] == "Estoque"
    assert (store.images_dir / second["imageFile"]).read_bytes() == PNG_1X1_BYTES
    assert len(image_files(store)) == 2

    data = store.load()
    assert [e["id"] for e in data["generatedImages"]] == [second["id"], first["id"]]


@pytest.mark.parametrize("payload", [
    None,
    "",
    "not a data uri",
    "data:text/plain;base64,aGVsbG8=",
    "data:image/png;base64,@@@not-base64@@@",
    "/api/data/images/gen_1.png",
])
def test_save_generated_image_rejects_malformed_payload(store, payload):
    with pytest.raises(InvalidImageDataError):
        store.save_generated_image("Balcão", payload)

    assert image_files(store) == []
    assert store.load()["generatedImages"] == []


def test_save_vision_analysis_with_image(store):
    result = {"objects": [], "summary": "1 person", "charts": []}
    entry = store.save_vision_analysis("Frente de Caixa", PNG_1X1_DATA_URI, "count people", result)

    assert entry["id"].startswith("vision_")
    assert entry["imageFile"] in image_files(store)
    assert entry["result"] == result
    assert store.load()["visionAnalyses"][0]["id"] == entry["id"]


def test_save_vision_analysis_tolerates_bad_image(store):
    entry = store.save_vision_analysis("Frente de Caixa", "garbage", "count people", {"summary": "x"})

    assert entry["imageFile"] is None
    assert image_files(store) == []
    assert store.load()["visionAnalyses"][0]["id"] == entry["id"]


def test_upsert_chat_session_preserves_started_at(store):
    first_messages = [{"role": "user", "content": "Oi"}]
    created = store.upsert_chat_session("chat_abc", first_messages)
    assert created["startedAt"] == created["lastMessageAt"]

    later_messages = first_messages + [{"role": "assistant", "content": "Olá!", "charts": []}]
    updated = store.upsert_chat_session("chat_abc", later_messages)

    assert updated["startedAt"] == created["startedAt"]
    assert updated["lastMessageAt"] >= created["lastMessageAt"]
    assert updated["messages"] == later_messages

    sessions = store.load()["chatSessions"]
    assert len(sessions) == 1
    assert sessions[0]["messages"] == later_messages


def test_upsert_chat_session_keeps_position_and_generates_ids(store):
    store.upsert_chat_session("chat_old", [])
    new = store.upsert_chat_session(None, [{"role": "user", "content": "Nova"}])
    store.upsert_chat_session("chat_old", [{"role": "user", "content": "de novo"}])

    assert new["id"].startswith("chat_")
    assert [s["id"] for s in store.load()["chatSessions"]] == [new["id"], "chat_old"]


def test_save_report_and_snapshot_defaults(store):
    report = store.save_sustainability_report({"energia": 12.4}, "# Relatório")
    snapshot = store.save_dashboard_snapshot()

    assert report["id"].startswith("sust_")
    assert report["charts"] == []
    assert report["inputData"] == {"energia": 12.4}
    assert snapshot["id"].startswith("dash_")
    assert snapshot["insights"] == []
    assert snapshot["charts"] == []
    assert snapshot["stats"] == {}
    assert snapshot["text"] == ""


def test_delete_removes_entry_and_owned_image(store):
    entry = store.save_generated_image("Balcão", PNG_1X1_DATA_URI)

    store.delete_entry("generated-images", entry["id"])

    assert store.load()["generatedImages"] == []
    assert image_files(store) == []
    with pytest.raises(EntryNotFoundError):
        store.delete_entry("generated-images", entry["id"])


def test_delete_entry_without_image(store):
    entry = store.save_vision_analysis("Frente de Caixa", None, "count", {"summary": ""})
    other = store.save_generated_image("Balcão", PNG_1X1_DATA_URI)

    store.delete_entry("vision", entry["id"])

    assert store.load()["visionAnalyses"] == []
    assert image_files(store) == [other["imageFile"]]


def test_delete_tolerates_missing_image_file(store):
    entry = store.save_generated_image("Balcão", PNG_1X1_DATA_URI)
    (store.images_dir / entry["imageFile"]).unlink()

    store.delete_entry("generated-images", entry["id"])

    assert store.load()["generatedImages"] == []


def test_delete_unknown_collection(store):
    with pytest.raises(UnknownCollectionError):
        store.delete_entry("weather", "x")


@pytest.mark.parametrize("filename", [
    "../store.json",
    "..",
    ".lock",
    "sub/dir.png",
    "..\\store.json",
    "",
])
def test_get_image_path_rejects_traversal(store, filename):
    store.load()
    with pytest.raises(ImageNotFoundError):
        store.get_image_path(filename)


def test_get_image_path_missing_file_creates_nothing(store):
    with pytest.raises(ImageNotFoundError):
        store.get_image_path("nope.png")
    assert not store.images_dir.exists()
    assert not store.store_file.exists()


def test_get_stats(store):
    store.save_generated_image("Balcão", PNG_1X1_DATA_URI)
    store.upsert_chat_session(None, [])

    stats = store.get_stats()

    assert stats["collections"]["generatedImages"] == 1
    assert stats["collections"]["chatSessions"] == 1
    assert stats["images"] == 1
    assert stats["store_file_size"] > 0


def test_save_generated_image_accepts_line_wrapped_base64(store):
    header, _, payload = PNG_1X1_DATA_URI.partition(",")
    wrapped = "\r\n".join(payload[i:i + 20] for i in range(0, len(payload), 20))

    entry = store.save_generated_image("Balcão", f"{header},{wrapped}")

    assert (store.images_dir / entry["imageFile"]).read_bytes() == PNG_1X1_BYTES
