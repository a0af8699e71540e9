"""End-to-end tests for the persistence routes."""

import json

from fastapi.testclient import TestClient

from fakes import PNG_1X1_BYTES, PNG_1X1_DATA_URI


def test_load_store_document(client: TestClient):
    resp = client.get("/api/data")

    assert resp.status_code == 200
    body = resp.json()
    assert body["version"] == 1
    assert body["visionAnalyses"] == []
    assert body["generatedImages"] == []


def test_save_vision_analysis_and_reload(client: TestClient, store):
    resp = client.post("/api/data/vision", json={
        "cameraName": "Frente de Caixa",
        "imageData": PNG_1X1_DATA_URI,
        "task": "count people",
        "result": {"summary": "1 person", "charts": []},
    })

    assert resp.status_code == 200
    entry = resp.json()
    assert entry["id"].startswith("vision_")
    assert entry["imageFile"]
    assert entry["cameraName"] == "Frente de Caixa"
    assert entry["result"]["summary"] == "1 person"
    assert (store.images_dir / entry["imageFile"]).exists()

    listed = client.get("/api/data").json()["visionAnalyses"]
    assert listed[0]["id"] == entry["id"]


def test_save_vision_without_image(client: TestClient):
    resp = client.post("/api/data/vision", json={
        "cameraName": "Estoque",
        "task": "nível de estoque",
        "result": {"summary": "ok"},
    })
    assert resp.status_code == 200
    assert resp.json()["imageFile"] is None


def test_save_generated_image_and_serve_it(client: TestClient):
    resp = client.post("/api/data/generated-image", json={
        "cameraName": "Balcão",
        "imageData": PNG_1X1_DATA_URI,
    })
    assert resp.status_code == 200
    entry = resp.json()
    assert entry["id"].startswith("genimg_")

    image = client.get(f"/api/data/images/{entry['imageFile']}")
    assert image.status_code == 200
    assert image.headers["content-type"] == "image/png"
    assert image.content == PNG_1X1_BYTES


def test_save_generated_image_rejects_bad_payload(client: TestClient, store):
    resp = client.post("/api/data/generated-image", json={
        "cameraName": "Balcão",
        "imageData": "hello",
    })

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert client.get("/api/data").json()["generatedImages"] == []
    assert list(store.images_dir.iterdir()) == []


def test_chat_upsert_route(client: TestClient):
    first = client.post("/api/data/chat", json={
        "messages": [{"role": "user", "content": "Como está a fila?"}],
    }).json()
    assert first["id"].startswith("chat_")

    second = client.post("/api/data/chat", json={
        "id": first["id"],
        "messages": [
            {"role": "user", "content": "Como está a fila?"},
            {"role": "assistant", "content": "5 pessoas", "charts": [], "timestamp": "2026-01-01T10:00:00.000Z"},
        ],
    }).json()

    assert second["startedAt"] == first["startedAt"]
    assert second["messages"][1] == {
        "role": "assistant", "content": "5 pessoas", "charts": [], "timestamp": "2026-01-01T10:00:00.000Z",
    }
    assert "charts" not in second["messages"][0]
    assert len(client.get("/api/data").json()["chatSessions"]) == 1


def test_chat_rejects_unknown_role(client: TestClient):
    resp = client.post("/api/data/chat", json={"messages": [{"role": "system", "content": "x"}]})
    assert resp.status_code == 422
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_save_sustainability_and_dashboard(client: TestClient):
    report = client.post("/api/data/sustainability", json={
        "inputData": {"energia": "12.4 kWh"},
        "report": "# Relatório",
        "charts": [{"type": "pie", "title": "Resíduos", "data": [{"name": "Orgânico", "value": 60}]}],
    }).json()
    assert report["id"].startswith("sust_")
    assert report["charts"][0]["data"][0]["value"] == 60

    snapshot = client.post("/api/data/dashboard", json={
        "insights": [{"type": "alert", "title": "Fila", "description": "Fila longa"}],
    }).json()
    assert snapshot["id"].startswith("dash_")
    assert snapshot["charts"] == []
    assert snapshot["stats"] == {}
    assert snapshot["text"] == ""

    data = client.get("/api/data").json()
    assert data["sustainabilityReports"][0]["id"] == report["id"]
    assert data["dashboardSnapshots"][0]["insights"][0]["title"] == "Fila"


def test_delete_entry_and_its_image(client: TestClient, store):
    entry = client.post("/api/data/generated-image", json={
        "cameraName": "Balcão", "imageData": PNG_1X1_DATA_URI,
    }).json()

    resp = client.delete(f"/api/data/generated-images/{entry['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert not (store.images_dir / entry["imageFile"]).exists()

    again = client.delete(f"/api/data/generated-images/{entry['id']}")
    assert again.status_code == 404
    assert again.json()["code"] == "NOT_FOUND"


def test_delete_unknown_id_leaves_store_unchanged(client: TestClient, store):
    client.post("/api/data/vision", json={
        "cameraName": "Frente de Caixa", "task": "count", "result": {"summary": ""},
    })
    before = store.store_file.read_text(encoding="utf-8")

    resp = client.delete("/api/data/vision/vision_does_not_exist")

    assert resp.status_code == 404
    body = resp.json()
    assert set(body) == {"error", "code"}
    assert store.store_file.read_text(encoding="utf-8") == before


def test_delete_unknown_collection(client: TestClient):
    resp = client.delete("/api/data/weather/abc")
    assert resp.status_code == 404
    assert resp.json()["code"] == "UNKNOWN_COLLECTION"


def test_missing_image_is_404_without_side_effects(client: TestClient, store):
    client.get("/api/data")
    before = sorted(p.name for p in store.images_dir.iterdir())

    resp = client.get("/api/data/images/nonexistent.png")

    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"
    assert sorted(p.name for p in store.images_dir.iterdir()) == before


def test_image_route_rejects_traversal(client: TestClient, store):
    client.get("/api/data")
    resp = client.get("/api/data/images/..%2Fstore.json")
    assert resp.status_code == 404


def test_store_stats(client: TestClient):
    client.post("/api/data/dashboard", json={"text": "ok"})
    stats = client.get("/api/data/stats").json()
    assert stats["collections"]["dashboardSnapshots"] == 1


def test_oversized_body_is_rejected(client: TestClient, monkeypatch):
    from app.config import settings

    monkeypatch.setattr(settings, "max_body_bytes", 10)
    resp = client.post(
        "/api/data/dashboard",
        content=json.dumps({"text": "longer than ten bytes"}),
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 413
    assert resp.json()["code"] == "PAYLOAD_TOO_LARGE"
