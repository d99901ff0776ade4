from models.snapshot import MemberSnapshot, ProjectSnapshot, TaskSnapshot
from services.assistant import (
    ASSISTANT_RULES, VOICE_ASSISTANT_RULES, WELCOME, VoiceAssistant, context_prompt, default_reply,
    generate_reply,
)
from services.http import ApiResult
from services.speech import SpeechRecognizer, Transcript


def _project(done=3, total=10, contributions=(80, 70)):
    return ProjectSnapshot(
        id="p1",
        title="Capstone",
        current_phase="Development",
        tasks=[TaskSnapshot(id=str(i), title=f"t{i}", status="completed" if i < done else "todo")
               for i in range(total)],
        members=[MemberSnapshot(id=str(i), name=f"m{i}", contribution_percentage=c)
                 for i, c in enumerate(contributions)],
    )


class DummyTTS:
    def __init__(self, result=None):
        self.result = result or ApiResult.ok(b"mp3-bytes")
        self.calls = []

    def text_to_speech(self, text, voice_id=None, voice_settings=None):
        self.calls.append((text, voice_id, voice_settings))
        return self.result


def test_progress_reply():
    reply = generate_reply("What is our progress?", _project())
    assert '"Capstone" is currently 30% complete' in reply
    assert "3 out of 10 tasks" in reply
    assert "Development phase" in reply
    assert "workload distribution" in reply


def test_progress_advice_bands():
    assert "Great progress" in generate_reply("status", _project(7, 10))
    assert "steady progress" in generate_reply("status", _project(4, 10))


def test_first_matching_rule_wins():
    # mentions both progress and team; progress is listed first
    assert generate_reply("team progress", _project()).startswith("Your project")
    assert generate_reply("how is the team doing", _project()).startswith("Your team has 2 members")


def test_team_reply():
    assert "average contribution of 75%" in generate_reply("team", _project())
    assert "significant contribution imbalances" in generate_reply("team", _project(contributions=(10, 20)))
    # no members: generic answer instead of dividing by zero
    assert generate_reply("team", _project(contributions=())).startswith("I can help analyze team dynamics")


def test_without_project():
    assert generate_reply("progress").startswith("I can help you track project progress")
    assert generate_reply("what's up") == default_reply()


def test_voice_rule_only_for_voice_assistant():
    assert generate_reply("change your voice", rules=ASSISTANT_RULES) == default_reply()
    assert "voice settings" in generate_reply("change your voice", rules=VOICE_ASSISTANT_RULES)


def test_context_prompt():
    prompt = context_prompt(_project())
    assert "- Project: Capstone" in prompt
    assert "- Progress: 30% complete" in prompt
    assert "Team Size: 2 members" in prompt
    assert "Current project context" not in context_prompt(None)


def test_final_transcript_is_answered_out_loud():
    tts = DummyTTS()
    assistant = VoiceAssistant(tts, project=_project())
    answer = assistant.handle_transcript(Transcript("what is our progress", 0.9, True))
    assert "30%" in answer.content
    assert answer.audio == b"mp3-bytes"
    assert [m.type for m in assistant.messages] == ["ai", "user", "ai"]
    assert assistant.messages[0].content == WELCOME
    assert tts.calls[0][2]["stability"] == 0.7
    assert not assistant.is_speaking


def test_interim_transcript_is_not_answered():
    assistant = VoiceAssistant(DummyTTS(), project=_project())
    assert assistant.handle_transcript(Transcript("what is", 0.5, False)) is None
    assert assistant.transcript == "what is"
    assert assistant.handle_transcript(Transcript("   ", 0.5, True)) is None
    assert len(assistant.messages) == 1


def test_tts_failure_sets_error():
    assistant = VoiceAssistant(DummyTTS(ApiResult.failure("ElevenLabs API error: 401", 401)))
    assert assistant.handle_message("help") is None
    assert assistant.error == "Failed to generate AI response"
    assert [m.type for m in assistant.messages] == ["ai", "user"]
    assert not assistant.is_speaking


def test_text_only_reply():
    tts = DummyTTS()
    assistant = VoiceAssistant(tts, project=_project())
    answer = assistant.handle_message("progress", speak=False)
    assert answer.audio is None
    assert tts.calls == []


def test_listening_unsupported():
    assistant = VoiceAssistant(DummyTTS(), recognizer=SpeechRecognizer())
    assert assistant.start_listening() is False
    assert assistant.error == "Speech recognition is not supported on this device"


def test_listening_flow():
    class Engine:
        def configure(self, options):
            pass

        def start(self, listener):
            self.listener = listener

        def stop(self):
            pass

    engine = Engine()
    assistant = VoiceAssistant(DummyTTS(), recognizer=SpeechRecognizer(engine), project=_project())
    assert assistant.start_listening()
    assert assistant.is_listening
    engine.listener.on_engine_error("network")
    assert assistant.error == "Speech recognition error: network"
    assert not assistant.is_listening
