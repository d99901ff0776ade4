import pytest
from fastapi.testclient import TestClient

import api
from services.http import ApiResult


class DummyTavus:
    def create_video(self, script, video_name=None, properties=None):
        return ApiResult.ok({"video_id": "v1", "status": "queued"})

    def get_video_status(self, video_id):
        return ApiResult.ok({"video_id": video_id, "status": "completed",
                             "download_url": "https://cdn.tavus.io/v1.mp4"})


class SilentTTS:
    def text_to_speech(self, text, voice_id=None, voice_settings=None):
        return ApiResult.failure("no audio")


@pytest.fixture
def client(store, monkeypatch):
    # no real waiting between status polls
    monkeypatch.setattr("services.video.POLL_INTERVAL_SECONDS", 0)
    api.app.dependency_overrides[api.get_store] = lambda: store
    api.app.dependency_overrides[api.get_tavus] = DummyTavus
    api.app.dependency_overrides[api.get_tts] = SilentTTS
    yield TestClient(api.app)
    api.app.dependency_overrides.clear()


def test_generate_video_requires_project_id(client):
    resp = client.post("/functions/v1/generate-video", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Project ID is required"}


def test_generate_video_unknown_project(client):
    resp = client.post("/functions/v1/generate-video", json={"projectId": "missing"})
    assert resp.status_code == 404


def test_generate_and_list_videos(client, store):
    p = store.insert_project({"title": "Capstone", "created_by": "u1"})
    resp = client.post("/functions/v1/generate-video",
                       json={"projectId": p["id"], "userId": "u1", "includeFeedback": False})
    assert resp.status_code == 200
    body = resp.json()
    assert body["videoUrl"] == "https://cdn.tavus.io/v1.mp4"

    listing = client.get(f"/functions/v1/generate-video/{p['id']}").json()
    assert [v["id"] for v in listing["videos"]] == [body["videoId"]]
    assert client.delete(f"/functions/v1/generate-video/{body['videoId']}").json() == {"success": True}


def test_ai_nudge(client, store):
    assert client.post("/functions/v1/ai-nudge", json={"projectId": "p1"}).status_code == 400

    p = store.insert_project({"title": "Capstone", "created_by": "u1"})
    resp = client.post("/functions/v1/ai-nudge",
                       json={"projectId": p["id"], "userId": "u1", "nudgeType": "motivation"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["voiceUrl"] == ""
    assert body["nudgeId"]


class MP3TTS:
    def text_to_speech(self, text, voice_id=None, voice_settings=None):
        return ApiResult.ok(b"ID3audio")


def test_nudge_voice_url_is_served(client, store, tmp_path, monkeypatch):
    # MEDIA_DIR is relative, so audio lands under tmp_path
    monkeypatch.chdir(tmp_path)
    api.app.dependency_overrides[api.get_tts] = MP3TTS
    p = store.insert_project({"title": "Capstone", "created_by": "u1"})
    body = client.post("/functions/v1/ai-nudge",
                       json={"projectId": p["id"], "userId": "u1", "nudgeType": "reminder"}).json()
    assert body["voiceUrl"].startswith("http://testserver/media/nudge-audio-")
    assert body["voiceUrl"].endswith(".mp3")

    audio = client.get(body["voiceUrl"])
    assert audio.status_code == 200
    assert audio.content == b"ID3audio"
    assert client.get("/media/nudge-audio-missing.mp3").status_code == 404


def test_lifespan_prepares_media_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    calls = []
    monkeypatch.setattr(api, "init_db", lambda: calls.append("init_db"))
    with TestClient(api.app) as c:
        assert (tmp_path / api.MEDIA_DIR).is_dir()
        assert c.post("/functions/v1/ai-nudge", json={}).status_code == 400
    assert calls == ["init_db"]
