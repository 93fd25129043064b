import sys, types
import numpy as np, cv2

import api.routes as routes
from companion.responses import DISMISSIVE_RESPONSES


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200 and r.json() == {"status": "ok"}

def test_analyze_hiding_feelings(client):
    r = client.post("/api/analyze", json={
        "user_text": "I'm fine",
        "face_emotion": {"emotion": "sad", "confidence": 90},
    })
    assert r.status_code == 200
    j = r.json()
    assert j["success"] is True
    assert j["ai_response"] in DISMISSIVE_RESPONSES["sad"]
    assert j["detected_emotion"] == "neutral"
    assert j["emotion_analysis"]["hiding_feelings"] is True
    assert j["emotion_analysis"]["primary_emotion"] == "sad"
    assert isinstance(j["conversation_id"], int)

def test_analyze_rejects_empty_text(client):
    r = client.post("/api/analyze", json={"user_text": ""})
    assert r.status_code == 422

def test_analyze_failure_returns_fallback(client, monkeypatch):
    def boom(*a, **k):
        raise RuntimeError("db down")
    monkeypatch.setattr(routes, "process_message", boom)
    r = client.post("/api/analyze", json={"user_text": "hello"})
    assert r.status_code == 500
    j = r.json()
    assert j["success"] is False
    assert j["ai_response"] == routes.FALLBACK_REPLY

def test_history_summary_and_clear(client):
    for text in ["I am so happy today!", "I feel sad", "I am so angry"]:
        assert client.post("/api/analyze", json={"user_text": text}).status_code == 200

    r = client.get("/api/history", params={"limit": 2})
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 2
    assert body["history"][0]["user_text"] == "I am so angry"

    s = client.get("/api/summary").json()["summary"]
    assert (s["happy"], s["sad"], s["angry"], s["neutral"]) == (1, 1, 1, 0)

    assert client.delete("/api/history").json()["success"] is True
    assert client.get("/api/history").json()["count"] == 0

def test_summary_for_other_day_is_zero(client):
    r = client.get("/api/summary", params={"date": "2020-01-01"})
    assert r.status_code == 200
    assert r.json()["summary"] == {"date": "2020-01-01", "happy": 0, "sad": 0, "angry": 0, "neutral": 0}

def test_summary_bad_date(client):
    assert client.get("/api/summary", params={"date": "yesterday"}).status_code == 422

def test_insight(client):
    r = client.get("/api/insight")
    assert r.status_code == 200
    assert r.json()["pattern"]["pattern"] == "insufficient_data"
    for text in ["so sad", "sad", "very sad"]:
        client.post("/api/analyze", json={"user_text": text})
    j = client.get("/api/insight", params={"limit": 5}).json()
    assert j["pattern"]["pattern"] == "sad"
    assert j["interventions"][0]["type"] == "professional_help"
    assert j["insight"].startswith("Looking at your recent emotional state")

def test_face_upload(client, monkeypatch):
    class DF:
        @staticmethod
        def analyze(frame, actions, enforce_detection, detector_backend):
            return [{"emotion": {"angry": 70.0, "neutral": 30.0}, "face_confidence": 0.9}]
    monkeypatch.setitem(sys.modules, "deepface", types.SimpleNamespace(DeepFace=DF))

    ok, buf = cv2.imencode(".jpg", np.zeros((24, 24, 3), dtype=np.uint8))
    r = client.post("/api/face", files={"file": ("frame.jpg", buf.tobytes(), "image/jpeg")})
    assert r.status_code == 200
    assert r.json()["face_emotion"]["emotion"] == "angry"
    assert r.json()["face_emotion"]["confidence"] == 70

def test_face_upload_bad_image(client):
    r = client.post("/api/face", files={"file": ("x.jpg", b"garbage", "image/jpeg")})
    assert r.status_code == 400

def test_analyze_accepts_fractional_face_confidence(client):
    r = client.post("/api/analyze", json={
        "user_text": "I am so happy today!",
        "face_emotion": {"emotion": "sad", "confidence": 87.5},
    })
    assert r.status_code == 200
    analysis = r.json()["emotion_analysis"]
    assert analysis["face_confidence"] == 88
    assert analysis["severity"] == 10
    assert analysis["concerning_mismatch"] is True
