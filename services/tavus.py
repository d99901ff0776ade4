# services/tavus.py
from typing import Dict, Optional

from config import get_setting
from services.http import ApiClient, ApiResult

ASSISTANT_CONTEXT = (
    "You are an AI assistant for CollabKill, a platform that helps university students "
    "collaborate fairly on group projects. You can help with project management, team "
    "coordination, and provide insights about collaboration."
)


class TavusClient(ApiClient):
    """Conversational video avatars and scripted videos."""
    service_name = "Tavus"
    base_url = "https://tavusapi.com/v2"

    def __init__(self, api_key: Optional[str] = None, replica_id: Optional[str] = None, **kwargs):
        super().__init__(api_key if api_key is not None else get_setting("TAVUS_API_KEY"), **kwargs)
        self.replica_id = replica_id or get_setting("TAVUS_REPLICA_ID")

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

    def create_video(self, script: str, replica_id: Optional[str] = None, video_name: Optional[str] = None,
                     background: Optional[str] = None, properties: Optional[Dict[str, str]] = None) -> ApiResult:
        result = self._request("POST", "/videos", json_body={
            "script": script,
            "replica_id": replica_id or self.replica_id,
            "video_name": video_name or "CollabKill AI Video",
            "background": background or "office",
            "callback_url": None,
            "properties": properties or {},
        }, expect_object=True)
        if result.success:
            result.data = {"video_id": result.data.get("video_id"), "status": result.data.get("status")}
        return result

    def get_video_status(self, video_id: str) -> ApiResult:
        result = self._request("GET", f"/videos/{video_id}", expect_object=True)
        if result.success:
            data = result.data
            result.data = {
                "video_id": data.get("video_id"),
                "status": data.get("status"),
                "download_url": data.get("download_url"),
            }
        return result

    def create_conversation(self, replica_id: Optional[str] = None,
                            properties: Optional[Dict[str, str]] = None) -> ApiResult:
        result = self._request("POST", "/conversations", json_body={
            "replica_id": replica_id or self.replica_id,
            "conversation_name": "CollabKill AI Assistant",
            "callback_url": None,
            "properties": {"context": ASSISTANT_CONTEXT, **(properties or {})},
        }, expect_object=True)
        if result.success:
            result.data = {
                "conversation_id": result.data.get("conversation_id"),
                "conversation_url": result.data.get("conversation_url"),
            }
        return result

    def end_conversation(self, conversation_id: str) -> ApiResult:
        return self._request("POST", f"/conversations/{conversation_id}/end")
