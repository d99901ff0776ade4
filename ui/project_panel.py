# ui/project_panel.py
import streamlit as st
import pandas as pd

from models.records import NewTask
from models.task import TASK_PRIORITIES, TASK_STATUSES
from services.projects import SessionContext
from utils.stats import project_report

STATUS_LABELS = {"todo": "To Do", "in-progress": "In Progress", "completed": "Completed"}


def render_project_header(ctx: SessionContext, project_id: str):
    project = ctx.get_project(project_id)
    st.header(project.title)
    st.write(project.description)

    report = project_report(project)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Progress", f"{report['progress']}%")
    c2.metric("Tasks done", f"{report['completed_tasks']}/{len(project.tasks)}")
    c3.metric("Avg. contribution", f"{report['average_contribution']}%")
    c4.metric("Days remaining", report["days_remaining"])
    st.progress(report["progress"] / 100)

    phase = st.selectbox("Current phase", project.phases,
                         index=project.phases.index(project.current_phase)
                         if project.current_phase in project.phases else 0,
                         key=f"phase_{project.id}")
    if phase != project.current_phase:
        ctx.update_project(project.id, {"current_phase": phase})
        st.success(f"Moved to {phase}")


def render_members(ctx: SessionContext, project_id: str):
    project = ctx.get_project(project_id)
    st.subheader("Team")
    data = [{"Name": m.name, "Email": m.email, "Role": m.role,
             "Contribution %": m.contribution_percentage,
             "Tasks completed": m.tasks_completed, "Hours": m.hours_logged}
            for m in project.members]
    st.dataframe(pd.DataFrame(data) if data else
                 pd.DataFrame(columns=["Name", "Email", "Role", "Contribution %", "Tasks completed", "Hours"]),
                 hide_index=True, use_container_width=True)


def render_tasks(ctx: SessionContext, project_id: str):
    project = ctx.get_project(project_id)
    st.subheader("Tasks")
    members = {m.id: m.name for m in project.members}

    columns = st.columns(len(TASK_STATUSES))
    for col, status in zip(columns, TASK_STATUSES):
        col.markdown(f"**{STATUS_LABELS[status]}**")
        for t in (t for t in project.tasks if t.status == status):
            with col.expander(t.title):
                st.caption(f"{t.priority} priority · due {t.deadline.date()} · "
                           f"{members.get(t.assigned_to, 'unassigned')}")
                if t.description:
                    st.write(t.description)
                if t.tags:
                    st.write(" ".join(f"`{tag}`" for tag in t.tags))
                new_status = st.selectbox("Status", TASK_STATUSES, index=TASK_STATUSES.index(t.status),
                                          format_func=STATUS_LABELS.get, key=f"st_{t.id}")
                if new_status != t.status:
                    ctx.update_task(project.id, t.id, {"status": new_status})
                    st.rerun()

    with st.form(f"new_task_{project.id}", clear_on_submit=True):
        st.markdown("**Add task**")
        title = st.text_input("Task title")
        description = st.text_area("Description")
        assignee = st.selectbox("Assign to", [""] + list(members.keys()),
                                format_func=lambda k: members.get(k, "—"))
        priority = st.selectbox("Priority", TASK_PRIORITIES, index=1)
        deadline = st.date_input("Deadline")
        tags = st.text_input("Tags (comma separated)")
        submitted = st.form_submit_button("Add task")
    if submitted and title:
        task = ctx.create_task(project.id, NewTask(
            title=title,
            description=description,
            assigned_to=assignee,
            priority=priority,
            deadline=pd.Timestamp(deadline, tz="UTC").to_pydatetime(),
            tags=[x.strip() for x in tags.split(",") if x.strip()],
        ))
        if task is not None:
            st.success("Task added")
