# ui/video_panel.py
import streamlit as st

from db import ProjectStore
from services.tavus import TavusClient
from services.video import VideoRequest, delete_video, generate_summary_video, list_videos


def render_video_panel(project, user_id: str):
    st.subheader("AI Summary Video")
    if not project.persisted:
        st.info("Summary videos are available once the project is saved.")
        return

    store = ProjectStore()
    with st.form(f"video_{project.id}"):
        c1, c2, c3 = st.columns(3)
        timeline = c1.checkbox("Timeline", value=True)
        feedback = c2.checkbox("Feedback", value=True)
        contributions = c3.checkbox("Contributions", value=True)
        submitted = st.form_submit_button("Generate summary video")

    if submitted:
        request = VideoRequest(project_id=project.id, user_id=user_id, include_timeline=timeline,
                               include_feedback=feedback, include_contributions=contributions)
        with st.spinner("Rendering video, this can take a few minutes…"):
            resp = generate_summary_video(request, store=store, client=TavusClient())
        if resp.status_code == 200:
            st.success("Video ready")
            st.video(resp.body["videoUrl"])
            with st.expander("Script"):
                st.text(resp.body["script"])
        else:
            st.error(resp.body.get("details") or resp.body.get("error"))

    listing = list_videos(store, project.id)
    if not listing["success"]:
        st.warning(listing["error"])
        return
    for v in listing["videos"]:
        with st.expander(f"Video from {v['created_at']:%Y-%m-%d %H:%M}"):
            if v["video_url"]:
                st.video(v["video_url"])
            if st.button("Delete", key=f"del_video_{v['id']}"):
                result = delete_video(store, v["id"])
                if result["success"]:
                    st.rerun()
                st.error(result["error"])
