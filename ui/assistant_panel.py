# ui/assistant_panel.py
import streamlit as st

from db import ProjectStore
from errors import ConfigurationError
from models.nudge import NUDGE_TYPES
from models.snapshot import ProjectSnapshot
from services.assistant import VoiceAssistant, context_prompt
from services.elevenlabs import VOICES, ElevenLabsClient
from services.nudge import NudgeRequest, send_nudge
from services.speech import Transcript
from services.tavus import TavusClient


def _assistant(project_id: str, snapshot: ProjectSnapshot) -> VoiceAssistant:
    key = f"assistant_{project_id}"
    if key not in st.session_state:
        st.session_state[key] = VoiceAssistant(ElevenLabsClient(), project=snapshot)
    assistant = st.session_state[key]
    assistant.project = snapshot  # keep figures current after edits
    return assistant


def render_assistant(project, user_id: str):
    st.subheader("AI Assistant")
    assistant = _assistant(project.id, ProjectSnapshot.from_record(project))

    c1, c2 = st.columns([2, 1])
    voice = c1.selectbox("Voice", list(VOICES.keys()), format_func=str.title, key=f"voice_{project.id}")
    assistant.voice_id = VOICES[voice]
    speak = c2.toggle("Speak replies", value=False, key=f"speak_{project.id}")

    for m in assistant.messages:
        with st.chat_message("assistant" if m.type == "ai" else "user"):
            st.write(m.content)
            if m.audio:
                st.audio(m.audio, format="audio/mpeg")

    question = st.chat_input("Ask about progress, your team or tasks…", key=f"chat_{project.id}")
    if question:
        assistant.error = None
        if speak:
            assistant.handle_transcript(Transcript(question, 1.0, True))
        else:
            assistant.handle_message(question.strip(), speak=False)
        st.rerun()
    if assistant.error:
        st.error(assistant.error)

    with st.expander("Video assistant"):
        _render_conversation(project.id, assistant)

    with st.expander("Send a nudge"):
        _render_nudge(project.id, user_id)


def _render_conversation(project_id: str, assistant: VoiceAssistant):
    key = f"conversation_{project_id}"
    conversation = st.session_state.get(key)
    tavus = TavusClient()
    if conversation is None:
        if st.button("Start video conversation", key=f"conv_start_{project_id}"):
            try:
                result = tavus.create_conversation(properties={"context": context_prompt(assistant.project)})
            except ConfigurationError as e:
                st.warning(str(e))
                return
            if result.success:
                st.session_state[key] = result.data
                st.rerun()
            else:
                st.error(result.error)
        return

    st.markdown(f"[Join the conversation]({conversation['conversation_url']})")
    if st.button("End conversation", key=f"conv_end_{project_id}"):
        result = tavus.end_conversation(conversation["conversation_id"])
        if not result.success:
            st.warning(result.error)
        st.session_state.pop(key, None)
        st.rerun()


def _render_nudge(project_id: str, user_id: str):
    with st.form(f"nudge_{project_id}"):
        nudge_type = st.selectbox("Type", NUDGE_TYPES, format_func=lambda x: x.replace("_", " ").title())
        message = st.text_area("Custom message (optional)")
        submitted = st.form_submit_button("Send nudge")
    if not submitted:
        return
    resp = send_nudge(
        NudgeRequest(project_id=project_id, user_id=user_id, nudge_type=nudge_type, message=message or None),
        store=ProjectStore(), tts=ElevenLabsClient(),
    )
    if resp.status_code != 200:
        st.error(resp.body.get("error", "Nudge failed"))
        return
    st.success(resp.body["message"])
    if resp.body["voiceUrl"]:
        st.audio(resp.body["voiceUrl"], format="audio/mpeg")
