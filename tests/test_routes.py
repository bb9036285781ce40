import pytest
from fastapi.testclient import TestClient
from PIL import Image

from conftest import FakeInferenceClient, make_image_bytes
from services.analysis_flow import AnalysisFlow
from services.capture.capture_source import CaptureSource
from services.chat.chat_flow import ChatFlow
from services.errors import CameraPermissionDeniedError, InferenceTransportError
from services.gemini.prompts import CHAT_GREETING, SUGGESTED_QUESTIONS


@pytest.fixture
def inference() -> FakeInferenceClient:
    return FakeInferenceClient()


@pytest.fixture
def client(monkeypatch, camera_backend, inference):
    monkeypatch.setenv("GOOGLE_API_KEY", "test-key")
    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        app.state.capture_source = CaptureSource(camera_backend)
        app.state.analysis_flow = AnalysisFlow(inference)
        app.state.chat_flow = ChatFlow(inference)
        yield test_client


def _upload(client, content, content_type="image/png", filename="skin.png"):
    return client.post("/capture/upload", files={"file": (filename, content, content_type)})


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["ok"] is True
    assert response.json()["capture_state"] == "idle"


def test_index_missing_frontend_returns_404(client):
    assert client.get("/").status_code == 404


def test_upload_then_fetch_image(client, png_bytes):
    response = _upload(client, png_bytes)

    assert response.status_code == 200
    assert response.json()["state"] == "has_image"
    assert response.json()["image"]["mime_type"] == "image/png"

    image = client.get("/capture/image")
    assert image.status_code == 200
    assert image.headers["content-type"] == "image/png"
    assert image.content == png_bytes


def test_upload_unreadable_file(client):
    response = _upload(client, b"not an image")

    assert response.status_code == 400
    assert response.json()["detail"]["error_kind"] == "UnreadableFile"


def test_get_image_without_selection_is_404(client):
    assert client.get("/capture/image").status_code == 404


def test_analysis_without_image_makes_no_call(client, inference):
    response = client.post("/analysis")

    assert response.status_code == 400
    assert response.json()["detail"]["error_kind"] == "NoImageSelected"
    assert inference.requests == []


def test_analysis_success_and_slot(client, inference, png_bytes):
    inference.outcomes = ["Likely contact dermatitis."]
    _upload(client, png_bytes)

    response = client.post("/analysis")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["analysis"] == "Likely contact dermatitis."
    assert body["timestamp"]
    slot = client.get("/analysis").json()
    assert slot["busy"] is False
    assert slot["result"]["analysis"] == "Likely contact dermatitis."


def test_analysis_failure_is_reported_in_slot(client, inference, png_bytes):
    inference.outcomes = [InferenceTransportError("HTTP Error 500: boom")]
    _upload(client, png_bytes)

    body = client.post("/analysis").json()

    assert body["ok"] is False
    assert body["error_kind"] == "TransportOrHTTPFailure"
    assert "HTTP Error 500: boom" in body["error"]


def test_new_upload_clears_previous_result(client, inference, png_bytes):
    inference.outcomes = ["first"]
    _upload(client, png_bytes)
    client.post("/analysis")

    _upload(client, png_bytes)

    assert client.get("/analysis").json()["result"] is None


def test_camera_lifecycle(client, camera_backend, png_bytes):
    _upload(client, png_bytes)

    started = client.post("/capture/camera/start", json={"facing": "back"}).json()
    assert started["state"] == "camera_active"
    assert started["image"] is None

    switched = client.post("/capture/camera/switch").json()
    assert switched["camera"]["facing"] == "front"
    assert len(camera_backend.open_handles) == 1

    captured = client.post("/capture/camera/capture").json()
    assert captured["state"] == "has_image"
    assert captured["camera"] is None
    assert captured["image"]["source"] == "camera"
    assert camera_backend.open_handles == []


def test_camera_stop_is_idempotent(client):
    client.post("/capture/camera/start", json={"facing": "front"})

    assert client.post("/capture/camera/stop").json()["state"] == "idle"
    assert client.post("/capture/camera/stop").json()["state"] == "idle"


def test_camera_permission_denied(client, camera_backend):
    camera_backend.open_error = CameraPermissionDeniedError("Camera access denied. Please allow camera permissions.")

    response = client.post("/capture/camera/start", json={"facing": "back"})

    assert response.status_code == 403
    assert response.json()["detail"]["error_kind"] == "PermissionDenied"


def test_capture_without_camera_is_conflict(client):
    response = client.post("/capture/camera/capture")

    assert response.status_code == 409
    assert response.json()["detail"]["error_kind"] == "CameraUnavailable"


def test_invalid_facing_mode_is_rejected(client):
    assert client.post("/capture/camera/start", json={"facing": "sideways"}).status_code == 422


def test_chat_session_flow(client, inference):
    inference.outcomes = ["Eczema causes itchy skin."]
    session = client.post("/chat/sessions").json()
    assert session["messages"][0]["text"] == CHAT_GREETING

    response = client.post(
        f"/chat/sessions/{session['session_id']}/messages",
        json={"text": "What are the symptoms of eczema?"},
    )

    assert response.status_code == 200
    messages = response.json()["messages"]
    assert [m["role"] for m in messages] == ["assistant", "user", "assistant"]
    assert messages[-1]["text"] == "Eczema causes itchy skin."


def test_blank_chat_message_is_ignored(client, inference):
    session_id = client.post("/chat/sessions").json()["session_id"]

    response = client.post(f"/chat/sessions/{session_id}/messages", json={"text": "   "})

    assert len(response.json()["messages"]) == 1
    assert inference.requests == []


def test_suggestion_fills_draft_and_send_uses_it(client, inference):
    suggestions = client.get("/chat/suggestions").json()["suggestions"]
    assert suggestions == list(SUGGESTED_QUESTIONS)
    session_id = client.post("/chat/sessions").json()["session_id"]

    drafted = client.post(f"/chat/sessions/{session_id}/suggestions/1").json()
    assert drafted["draft"] == SUGGESTED_QUESTIONS[1]

    sent = client.post(f"/chat/sessions/{session_id}/messages", json={}).json()
    assert sent["messages"][1]["text"] == SUGGESTED_QUESTIONS[1]
    assert sent["draft"] == ""


def test_put_draft(client):
    session_id = client.post("/chat/sessions").json()["session_id"]

    response = client.put(f"/chat/sessions/{session_id}/draft", json={"text": "Is acne contagious?"})

    assert response.json()["draft"] == "Is acne contagious?"
    assert client.get(f"/chat/sessions/{session_id}").json()["draft"] == "Is acne contagious?"


def test_unknown_chat_session_is_404(client):
    assert client.get("/chat/sessions/nope").status_code == 404
    assert client.post("/chat/sessions/nope/messages", json={"text": "hi"}).status_code == 404


def test_unknown_suggestion_is_404(client):
    session_id = client.post("/chat/sessions").json()["session_id"]

    assert client.post(f"/chat/sessions/{session_id}/suggestions/9").status_code == 404


def test_deleted_chat_session_is_404(client):
    session_id = client.post("/chat/sessions").json()["session_id"]

    response = client.delete(f"/chat/sessions/{session_id}")

    assert response.status_code == 200
    assert response.json() == {"session_id": session_id, "deleted": True}
    assert client.get(f"/chat/sessions/{session_id}").status_code == 404
    assert client.delete(f"/chat/sessions/{session_id}").status_code == 404


def test_oversized_upload_is_unreadable(client, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    response = _upload(client, make_image_bytes("PNG", (64, 64)))

    assert response.status_code == 400
    assert response.json()["detail"]["error_kind"] == "UnreadableFile"


def test_capture_state_carries_preview(client, png_bytes):
    assert client.get("/capture").json()["preview"] is None

    body = _upload(client, png_bytes).json()

    assert body["preview"].startswith("data:image/png;base64,")


def test_start_camera_without_body_defaults_to_back(client):
    response = client.post("/capture/camera/start")

    assert response.status_code == 200
    assert response.json()["camera"]["facing"] == "back"
