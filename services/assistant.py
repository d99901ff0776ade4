# services/assistant.py
"""Canned assistant replies and the voice assistant loop.

Replies come from an ordered rule table: the first rule whose predicate
matches the lower-cased message builds the answer, otherwise the default
does. No language model is involved.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from errors import CollabError
from models.ids import new_id, utcnow
from models.snapshot import ProjectSnapshot
from services.elevenlabs import ASSISTANT_VOICE_SETTINGS, VOICES
from services.speech import SpeechRecognizer, Transcript
from utils.progress import average_contribution, project_progress

logger = logging.getLogger(__name__)

Builder = Callable[[Optional[ProjectSnapshot]], str]


@dataclass(frozen=True)
class ResponseRule:
    name: str
    predicate: Callable[[str], bool]
    build: Builder


def mentions(*words: str) -> Callable[[str], bool]:
    return lambda message: any(w in message for w in words)


def _progress_reply(project: Optional[ProjectSnapshot]) -> str:
    if project is None:
        return ("I can help you track project progress. Please share your project details or "
                "navigate to a specific project for detailed insights.")
    done = len(project.tasks_with_status("completed"))
    total = len(project.tasks)
    progress = project_progress(project.tasks)
    if progress >= 70:
        advice = "Great progress! Keep up the excellent work."
    elif progress >= 40:
        advice = ("You're making steady progress. Consider reviewing task assignments "
                  "to accelerate completion.")
    else:
        advice = ("The project needs attention. I recommend reviewing team workload distribution "
                  "and setting clearer milestones.")
    return (f'Your project "{project.title}" is currently {progress}% complete. '
            f"You've finished {done} out of {total} tasks. "
            f"The team is in the {project.current_phase} phase. {advice}")


def _team_reply(project: Optional[ProjectSnapshot]) -> str:
    if project is None or not project.members:
        return ("I can help analyze team dynamics and collaboration patterns. Share your project "
                "details for specific insights about team performance.")
    avg = average_contribution(project.members)
    if avg >= 70:
        advice = "The team shows strong engagement across all members."
    elif avg >= 50:
        advice = "Most team members are actively contributing. Consider reaching out to less active members."
    else:
        advice = ("There are significant contribution imbalances. I recommend redistributing tasks "
                  "and providing additional support to underperforming members.")
    return (f"Your team has {len(project.members)} members with an average contribution "
            f"of {avg}%. {advice}")


def _task_reply(_project) -> str:
    return ("I can help you manage tasks effectively. Consider breaking down large tasks into "
            "smaller, manageable pieces, setting clear deadlines, and ensuring balanced workload "
            "distribution among team members.")


def _help_reply(_project) -> str:
    return ("I'm here to help with project management, team coordination, and collaboration "
            "insights. You can ask me about project progress, team performance, task management, "
            "or any specific challenges you're facing with your group project.")


def _voice_reply(_project) -> str:
    return ("I can adjust my voice settings! You can change my voice type, speaking speed, and "
            "tone using the settings panel. I have several different voices available to choose from.")


def default_reply(_project=None) -> str:
    return ("I understand you're asking about your project. I can help with project management, "
            "team coordination, progress tracking, and collaboration insights. Could you be more "
            "specific about what you'd like to know?")


ASSISTANT_RULES: List[ResponseRule] = [
    ResponseRule("progress", mentions("progress", "status"), _progress_reply),
    ResponseRule("team", mentions("team", "member", "collaboration"), _team_reply),
    ResponseRule("tasks", mentions("task", "assignment"), _task_reply),
    ResponseRule("help", mentions("help", "how"), _help_reply),
]

VOICE_ASSISTANT_RULES: List[ResponseRule] = ASSISTANT_RULES + [
    ResponseRule("voice", mentions("voice", "sound"), _voice_reply),
]


def generate_reply(message: str, project: Optional[ProjectSnapshot] = None,
                   rules: List[ResponseRule] = ASSISTANT_RULES,
                   default: Builder = default_reply) -> str:
    text = message.lower()
    for rule in rules:
        if rule.predicate(text):
            return rule.build(project)
    return default(project)


BASE_CONTEXT = """You are an AI assistant for CollabKill, a platform that helps university students collaborate fairly on group projects. You can help with:
- Project management and task organization
- Team coordination and communication
- Analyzing contribution patterns and workload distribution
- Providing collaboration insights and recommendations
- Answering questions about project progress and team performance"""


def context_prompt(project: Optional[ProjectSnapshot] = None) -> str:
    """Context handed to the video avatar when a conversation starts."""
    if project is None:
        return BASE_CONTEXT
    return f"""{BASE_CONTEXT}

Current project context:
- Project: {project.title}
- Description: {project.description}
- Current Phase: {project.current_phase}
- Team Size: {len(project.members)} members
- Progress: {project_progress(project.tasks)}% complete

Please provide specific, actionable advice based on this project data."""


# ---- voice assistant ----

WELCOME = ("Hello! I'm your voice assistant for CollabKill. I can help you with project management, "
           "team coordination, and collaboration insights. Just speak to me and I'll respond with voice!")


@dataclass
class ChatMessage:
    type: str  # user | ai
    content: str
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=utcnow)
    audio: Optional[bytes] = None


class VoiceAssistant:
    """Transcript in, spoken reply out, with a running message log."""

    def __init__(self, tts, recognizer: Optional[SpeechRecognizer] = None,
                 project: Optional[ProjectSnapshot] = None,
                 voice_id: str = VOICES["RACHEL"], voice_settings: Optional[dict] = None,
                 rules: List[ResponseRule] = VOICE_ASSISTANT_RULES):
        self.tts = tts
        self.recognizer = recognizer or SpeechRecognizer()
        self.project = project
        self.voice_id = voice_id
        self.voice_settings = dict(voice_settings or ASSISTANT_VOICE_SETTINGS)
        self.rules = rules
        self.messages: List[ChatMessage] = [ChatMessage("ai", WELCOME)]
        self.transcript = ""
        self.error: Optional[str] = None
        self.is_speaking = False

    @property
    def is_listening(self) -> bool:
        return self.recognizer.is_listening

    def start_listening(self) -> bool:
        if not self.recognizer.is_supported():
            self.error = "Speech recognition is not supported on this device"
            return False
        started = self.recognizer.start_listening(
            on_result=self.handle_transcript,
            on_error=self._speech_error,
        )
        if started:
            self.error = None
        return started

    def stop_listening(self) -> None:
        self.recognizer.stop_listening()

    def _speech_error(self, error: str) -> None:
        self.error = f"Speech recognition error: {error}"
        self.recognizer.stop_listening()

    def handle_transcript(self, result: Transcript) -> Optional[ChatMessage]:
        self.transcript = result.transcript
        if result.is_final and result.transcript.strip():
            self.transcript = ""
            return self.handle_message(result.transcript.strip())
        return None

    def handle_message(self, message: str, speak: bool = True) -> Optional[ChatMessage]:
        """Answer ``message``, out loud unless ``speak`` is off. A spoken
        reply is only logged once its audio exists."""
        self.messages.append(ChatMessage("user", message))
        reply = generate_reply(message, self.project, self.rules)
        if not speak:
            answer = ChatMessage("ai", reply)
            self.messages.append(answer)
            return answer
        self.is_speaking = True
        try:
            result = self.tts.text_to_speech(reply, voice_id=self.voice_id,
                                             voice_settings=self.voice_settings)
            if not result.success or not result.data:
                raise CollabError(result.error or "Failed to generate speech")
        except CollabError as e:
            logger.error("Error generating AI response: %s", e)
            self.error = "Failed to generate AI response"
            return None
        finally:
            self.is_speaking = False
        answer = ChatMessage("ai", reply, audio=result.data)
        self.messages.append(answer)
        return answer
