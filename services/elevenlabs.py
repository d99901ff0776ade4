# services/elevenlabs.py
from typing import Dict, Optional

from config import get_setting
from services.http import ApiClient, ApiResult

VOICES = {
    "RACHEL": "21m00Tcm4TlvDq8ikWAM",  # professional female
    "DREW": "29vD33N1CtxCmqQRPOHJ",    # professional male
    "BELLA": "EXAVITQu4vr4xnSDxMaL",   # young female
    "ANTONI": "ErXwobaYiN019PkySvjV",  # warm male
    "ELLI": "MF3mGyEYCl7XYWbV9V6O",    # energetic female
    "JOSH": "TxGEqnHWrfWFTfGW9XjX",    # deep male
    "ARNOLD": "VR6AewLTigWG4xSOukaG",  # strong male
    "ADAM": "pNInz6obpgDQGcFmaJgB",    # middle-aged male
    "SAM": "yoZ06aMxZJJ28mfd3POQ",     # narrator
}

DEFAULT_MODEL = "eleven_monolingual_v1"
DEFAULT_VOICE_SETTINGS = {
    "stability": 0.5,
    "similarity_boost": 0.5,
    "style": 0.0,
    "use_speaker_boost": True,
}
# what the assistant and the nudges speak with
ASSISTANT_VOICE_SETTINGS = {
    "stability": 0.7,
    "similarity_boost": 0.8,
    "style": 0.2,
    "use_speaker_boost": True,
}


class ElevenLabsClient(ApiClient):
    service_name = "ElevenLabs"
    base_url = "https://api.elevenlabs.io/v1"

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(api_key if api_key is not None else get_setting("ELEVENLABS_API_KEY"), **kwargs)

    def _headers(self) -> Dict[str, str]:
        return {"xi-api-key": self.api_key}

    def text_to_speech(self, text: str, voice_id: Optional[str] = None, model_id: Optional[str] = None,
                       voice_settings: Optional[Dict] = None) -> ApiResult:
        """Synthesize ``text``; on success ``data`` holds the MP3 bytes."""
        return self._request(
            "POST",
            f"/text-to-speech/{voice_id or VOICES['RACHEL']}",
            json_body={
                "text": text,
                "model_id": model_id or DEFAULT_MODEL,
                "voice_settings": {**DEFAULT_VOICE_SETTINGS, **(voice_settings or {})},
            },
            headers={"Accept": "audio/mpeg", "Content-Type": "application/json"},
            binary=True,
        )

    def get_voices(self) -> ApiResult:
        result = self._request("GET", "/voices", expect_object=True)
        if result.success:
            result.data = result.data.get("voices", [])
        return result
