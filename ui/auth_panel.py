# ui/auth_panel.py
import streamlit as st

from errors import AuthError
from services.auth import ROLES, SessionStore

__all__ = ["render_auth_gate"]


def render_auth_gate(sessions: SessionStore) -> bool:
    """Sign-in / sign-up forms. Returns True once someone is signed in."""
    if sessions.current is not None:
        return True

    st.title("CollabKill")
    st.caption("Fair collaboration for university group projects")

    sign_in_tab, sign_up_tab = st.tabs(["Sign in", "Create account"])
    with sign_in_tab:
        with st.form("sign_in"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in")
        if submitted:
            try:
                sessions.sign_in(email, password)
                st.rerun()
            except AuthError as e:
                st.error(str(e))

    with sign_up_tab:
        with st.form("sign_up"):
            name = st.text_input("Full name")
            email = st.text_input("Email", key="su_email")
            password = st.text_input("Password", type="password", key="su_password")
            role = st.selectbox("I am a", ROLES, format_func=str.title)
            submitted = st.form_submit_button("Create account")
        if submitted:
            try:
                sessions.sign_up(email, password, name or email.split("@")[0], role)
                st.rerun()
            except AuthError as e:
                st.error(str(e))
    return False
