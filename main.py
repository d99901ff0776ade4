# main.py

#============================================================#
#                         CollabKill                         #
#============================================================#
# Purpose     : Fair collaboration for university group      #
#               projects: tasks, contributions, phases, a    #
#               voice assistant and AI summary videos        #
#============================================================#

import streamlit as st

import db
from config import configure_logging
from services.auth import SessionStore
from ui.assistant_panel import render_assistant
from ui.auth_panel import render_auth_gate
from ui.dashboard_panel import render_dashboard, render_new_project
from ui.project_panel import render_members, render_project_header, render_tasks
from ui.video_panel import render_video_panel

configure_logging()

st.set_page_config(
    page_title="CollabKill",
    page_icon="🤝",
    layout="wide",
)


def force_rerun():
    fn = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if fn:
        fn()


@st.cache_resource
def _init_db_once():
    db.init_db()
    return True

_init_db_once()

# one SessionStore per browser session
if "sessions" not in st.session_state:
    st.session_state["sessions"] = SessionStore()
sessions: SessionStore = st.session_state["sessions"]

# ======================  AUTH GATE  ======================
if not render_auth_gate(sessions):
    st.stop()

ctx = sessions.current
identity = sessions.identity

# ======================  SIDEBAR  ======================
with st.sidebar:
    st.image(identity.avatar, width=64)
    st.markdown(f"**{identity.name}**  \n{identity.email}  \n_{identity.role.title()}_")
    if st.button("Reload projects", use_container_width=True):
        ctx.load_projects()
        force_rerun()
    if ctx.current_project_id and st.button("← Dashboard", use_container_width=True):
        ctx.set_current_project(None)
        force_rerun()
    if st.button("Sign out", use_container_width=True):
        sessions.sign_out()
        force_rerun()

# ======================  DASHBOARD  ======================
project = ctx.current_project
if project is None:
    picked = render_dashboard(ctx)
    if picked:
        ctx.set_current_project(picked)
        force_rerun()
    st.markdown("---")
    render_new_project(ctx)
    st.stop()

# ======================  PROJECT  ======================
render_project_header(ctx, project.id)

tab1, tab2, tab3, tab4 = st.tabs(["Tasks", "Team", "AI Assistant", "Summary Video"])
with tab1:
    render_tasks(ctx, project.id)
with tab2:
    render_members(ctx, project.id)
with tab3:
    render_assistant(ctx.get_project(project.id), identity.id)
with tab4:
    render_video_panel(ctx.get_project(project.id), identity.id)

if identity.id == project.created_by:
    with st.expander("Danger zone"):
        if st.button("Delete project", type="primary"):
            ctx.delete_project(project.id)
            force_rerun()
