# ui/dashboard_panel.py
import streamlit as st
import pandas as pd

from models.project import DEFAULT_PHASES
from models.records import NewMember, NewProject
from services.projects import SessionContext
from utils.stats import dashboard_stats

__all__ = ["render_dashboard", "render_new_project"]


def render_dashboard(ctx: SessionContext):
    """Headline stats plus one row per project. Returns the id picked to open."""
    st.subheader(f"Welcome back, {ctx.identity.name}")
    stats = dashboard_stats(ctx.projects)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Active projects", stats["active_projects"])
    c2.metric("Completed", stats["completed_projects"])
    c3.metric("Team members", stats["team_members"])
    c4.metric("Hours logged", f"{stats['hours_logged']:g}")

    if not ctx.projects:
        st.info("No projects yet. Create one below.")
        return None

    if any(not p.persisted for p in ctx.projects):
        st.caption("Some projects are shown from local data and are not saved.")

    df = pd.DataFrame([{
        "Title": p.title,
        "Phase": p.current_phase,
        "Progress %": p.progress,
        "Members": len(p.members),
        "Tasks": len(p.tasks),
        "Deadline": p.deadline.date(),
        "Status": p.status,
    } for p in ctx.projects])
    st.dataframe(df, hide_index=True, use_container_width=True)

    options = {f"{p.title} ({p.progress}%)": p.id for p in ctx.projects}
    label = st.selectbox("Open project", ["—"] + list(options.keys()))
    return options.get(label)


def _parse_members(text: str):
    # one "Name, email, role" per line
    members = []
    for line in text.splitlines():
        parts = [x.strip() for x in line.split(",")]
        if len(parts) >= 2 and parts[0] and parts[1]:
            members.append(NewMember(name=parts[0], email=parts[1], role=parts[2] if len(parts) > 2 else ""))
    return members


def render_new_project(ctx: SessionContext):
    st.subheader("New Project")
    with st.form("new_project", clear_on_submit=True):
        title = st.text_input("Project title", placeholder="E-commerce Mobile Application")
        description = st.text_area("Description")
        deadline = st.date_input("Deadline")
        members_text = st.text_area("Team members", placeholder="Alice Johnson, alice@university.edu, Frontend Developer")
        submitted = st.form_submit_button("Create project")

    if submitted and title:
        project = ctx.create_project(NewProject(
            title=title,
            description=description,
            phases=list(DEFAULT_PHASES),
            current_phase=DEFAULT_PHASES[0],
            deadline=pd.Timestamp(deadline, tz="UTC").to_pydatetime(),
            members=_parse_members(members_text),
        ))
        if project is None:
            st.error("Project could not be created")
        elif project.persisted:
            st.success(f"Created project {project.title}")
        else:
            st.warning("Could not save the project; it is kept for this session only.")
