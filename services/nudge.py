# services/nudge.py
"""Short reminder/motivation messages, optionally spoken
(``POST /functions/v1/ai-nudge``)."""
import logging
import uuid
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from config import get_setting
from errors import CollabError, ConfigurationError
from services.elevenlabs import ASSISTANT_VOICE_SETTINGS, VOICES
from services.http import FunctionResponse

logger = logging.getLogger(__name__)

NUDGE_MESSAGES = {
    "reminder": ("Hi there! Just a friendly reminder that you haven't logged any activity in the past few "
                 "days. Your team is counting on your contributions. Would you like to update your progress "
                 "or check out what tasks are available?"),
    "motivation": ("You're doing great work on this project! Your contributions are valuable to the team. "
                   "Keep up the excellent collaboration and don't hesitate to reach out if you need any support."),
    "workload_balance": ("I noticed there might be an opportunity to better balance the workload in your team. "
                         "Consider discussing task redistribution with your teammates to ensure everyone can "
                         "contribute effectively."),
}
DEFAULT_NUDGE = ("Hope your project is going well! Remember that consistent collaboration and communication "
                 "are key to success. Keep up the great work!")


class NudgeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_id: Optional[str] = Field(default=None, alias="projectId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    nudge_type: Optional[str] = Field(default=None, alias="nudgeType")
    message: Optional[str] = None


def nudge_message(nudge_type: str, custom: Optional[str] = None) -> str:
    if custom:
        return custom
    return NUDGE_MESSAGES.get(nudge_type, DEFAULT_NUDGE)


def synthesize_voice(tts, message: str, media_dir=None) -> str:
    """Speak ``message`` into an MP3 under the media directory and return
    its path, or "" when no audio could be produced."""
    try:
        result = tts.text_to_speech(message, voice_id=VOICES["RACHEL"],
                                    voice_settings=ASSISTANT_VOICE_SETTINGS)
    except ConfigurationError:
        logger.info("ElevenLabs API key not found, skipping voice generation")
        return ""
    if not result.success:
        return ""
    out_dir = Path(media_dir or get_setting("MEDIA_DIR"))
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"nudge-audio-{uuid.uuid4().hex}.mp3"
    try:
        path.write_bytes(result.data)
    except OSError as e:
        logger.error("Could not save nudge audio: %s", e)
        return ""
    return path.as_posix()


def send_nudge(request: NudgeRequest, *, store, tts, media_dir=None,
               media_url: Optional[str] = None) -> FunctionResponse:
    """``media_url`` is where ``media_dir`` is served; when given, the voice
    file comes back as a URL under it instead of a local path."""
    if not (request.project_id and request.user_id and request.nudge_type):
        return FunctionResponse(400, {"error": "Missing required fields"})

    try:
        project = store.get_project(request.project_id)
    except CollabError as e:
        logger.error("AI nudge error: %s", e)
        return FunctionResponse(500, {"error": "Internal server error", "details": str(e)})
    if project is None:
        return FunctionResponse(404, {"error": "Project not found"})

    message = nudge_message(request.nudge_type, request.message)
    voice_url = synthesize_voice(tts, message, media_dir)
    if voice_url and media_url:
        voice_url = f"{media_url.rstrip('/')}/{Path(voice_url).name}"

    nudge_id = None
    try:
        nudge_id = store.insert_nudge({
            "project_id": request.project_id,
            "user_id": request.user_id,
            "nudge_type": request.nudge_type,
            "message": message,
            "voice_url": voice_url,
        })["id"]
    except CollabError as e:
        logger.error("Database error: %s", e)

    return FunctionResponse(200, {
        "success": True,
        "message": message,
        "voiceUrl": voice_url,
        "nudgeId": nudge_id,
    })
