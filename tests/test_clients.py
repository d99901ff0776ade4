import pytest
import requests

from errors import ConfigurationError
from services.elevenlabs import ElevenLabsClient, VOICES
from services.tavus import TavusClient


class DummyResponse:
    def __init__(self, status_code=200, json_data=None, content=None, text=None):
        self.status_code = status_code
        self._json = json_data
        self.content = content if content is not None else (b"{}" if json_data is not None else b"")
        self.text = text if text is not None else ""

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._json is None:
            raise ValueError("no json")
        return self._json


class DummySession:
    def __init__(self, response=None, error=None):
        self.response = response or DummyResponse(json_data={})
        self.error = error
        self.calls = []

    def request(self, method, url, json=None, timeout=None, headers=None):
        self.calls.append({"method": method, "url": url, "json": json, "timeout": timeout, "headers": headers})
        if self.error:
            raise self.error
        return self.response


def test_missing_key_fails_before_any_request():
    session = DummySession()
    client = TavusClient(api_key="", session=session)
    with pytest.raises(ConfigurationError):
        client.create_video("hello")
    assert session.calls == []

    tts = ElevenLabsClient(api_key="", session=session)
    with pytest.raises(ConfigurationError):
        tts.text_to_speech("hello")
    assert session.calls == []


def test_http_error_carries_status_and_body():
    session = DummySession(DummyResponse(500, text="upstream exploded"))
    result = TavusClient(api_key="k", session=session).create_video("hello")
    assert not result.success
    assert result.status_code == 500
    assert result.body == "upstream exploded"
    assert "500" in result.error


def test_transport_error_has_no_status():
    session = DummySession(error=requests.ConnectionError("refused"))
    result = TavusClient(api_key="k", session=session).get_video_status("v1")
    assert not result.success
    assert result.status_code is None


def test_create_video_request_shape():
    session = DummySession(DummyResponse(json_data={"video_id": "v1", "status": "queued", "extra": 1}))
    client = TavusClient(api_key="k", replica_id="r1", session=session, timeout=5)
    result = client.create_video("script text", video_name="Demo")
    assert result.success
    assert result.data == {"video_id": "v1", "status": "queued"}
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://tavusapi.com/v2/videos"
    assert call["headers"]["Authorization"] == "Bearer k"
    assert call["json"]["replica_id"] == "r1"
    assert call["json"]["video_name"] == "Demo"
    assert call["timeout"] == 5


def test_video_status_and_conversation():
    session = DummySession(DummyResponse(json_data={
        "video_id": "v1", "status": "completed", "download_url": "https://cdn/v1.mp4",
        "conversation_id": "c1", "conversation_url": "https://tavus.daily.co/c1",
    }))
    client = TavusClient(api_key="k", session=session)
    assert client.get_video_status("v1").data["download_url"] == "https://cdn/v1.mp4"
    conv = client.create_conversation(properties={"context": "custom"})
    assert conv.data == {"conversation_id": "c1", "conversation_url": "https://tavus.daily.co/c1"}
    assert session.calls[-1]["json"]["properties"]["context"] == "custom"


def test_end_conversation_empty_body():
    session = DummySession(DummyResponse(204))
    result = TavusClient(api_key="k", session=session).end_conversation("c1")
    assert result.success
    assert result.data == {}
    assert session.calls[0]["url"].endswith("/conversations/c1/end")


def test_text_to_speech_returns_audio_bytes():
    session = DummySession(DummyResponse(content=b"ID3mp3"))
    result = ElevenLabsClient(api_key="xi", session=session).text_to_speech(
        "hello", voice_settings={"stability": 0.7})
    assert result.success
    assert result.data == b"ID3mp3"
    call = session.calls[0]
    assert call["url"].endswith(f"/text-to-speech/{VOICES['RACHEL']}")
    assert call["headers"]["xi-api-key"] == "xi"
    assert call["headers"]["Accept"] == "audio/mpeg"
    assert call["json"]["voice_settings"]["stability"] == 0.7
    assert call["json"]["voice_settings"]["similarity_boost"] == 0.5


def test_get_voices():
    session = DummySession(DummyResponse(json_data={"voices": [{"voice_id": "a"}]}))
    result = ElevenLabsClient(api_key="xi", session=session).get_voices()
    assert result.data == [{"voice_id": "a"}]


def test_non_object_json_is_a_failure():
    session = DummySession(DummyResponse(json_data=["not", "an", "object"]))
    tavus = TavusClient(api_key="k", session=session)
    for result in (tavus.create_video("hello"), tavus.get_video_status("v1"), tavus.create_conversation()):
        assert not result.success
        assert result.status_code == 200
        assert "unexpected response" in result.error

    voices = ElevenLabsClient(api_key="xi", session=session).get_voices()
    assert not voices.success
    assert len(session.calls) == 4
