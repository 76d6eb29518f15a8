from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import streamlit as st

from api_client import ApiError
from api_client import api_call as _api_call


def _get_api_base() -> str:
    # Prefer env var so we don't require secrets.toml to exist.
    env = os.getenv("API_BASE")
    if env:
        return env.rstrip("/")
    try:
        # st.secrets raises if there is no secrets file at all, so guard it.
        return str(st.secrets.get("API_BASE", "http://127.0.0.1:8000")).rstrip("/")
    except Exception:
        return "http://127.0.0.1:8000"


API_BASE = _get_api_base()


def _auth_headers() -> Dict[str, str]:
    token = st.session_state.get("auth_token")
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def api_call(method: str, path: str, payload: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
    headers = kwargs.pop("headers", None) or _auth_headers()
    return _api_call(API_BASE, method, path, payload, headers=headers, **kwargs)


def _rerun() -> None:
    # Compatible rerun for new/old Streamlit versions.
    fn = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if fn:
        fn()


def _run_action(label: str, method: str, path: str) -> None:
    try:
        api_call(method, path)
    except ApiError as e:
        st.error(f"{label} failed: {e}")
        return
    st.success(f"{label} succeeded")
    _rerun()


st.set_page_config(page_title="Job Board", layout="wide")
st.title("Job Board")
st.caption("Post jobs, pick one up, and hand it back when you are done.")

st.session_state.setdefault("auth_token", None)
st.session_state.setdefault("username", None)

# -----------------
# Auth (HTTP Basic exchanged for a bearer token)
# -----------------
with st.sidebar:
    st.header("Account")
    if st.session_state.get("auth_token"):
        try:
            me = api_call("GET", "/auth/me")
        except ApiError:
            # Token expired or backend down; fall back to the login form.
            st.session_state["auth_token"] = None
            _rerun()
        else:
            st.success(f"Logged in as {me['username']}")
            st.write(f"Authored: {len(me['authored'])} · Running: {len(me['running'])}")
            if st.button("Log out"):
                st.session_state["auth_token"] = None
                st.session_state["username"] = None
                _rerun()
    else:
        mode = st.radio("Mode", ["Log in", "Register"], horizontal=True)
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        if st.button(mode, disabled=not (username and password)):
            try:
                if mode == "Register":
                    api_call("POST", "/users", {"username": username, "password": password}, headers={"Accept": "application/json"})
                token = api_call("POST", "/auth/token", auth=(username, password), headers={"Accept": "application/json"})
            except ApiError as e:
                st.error(str(e))
            else:
                st.session_state["auth_token"] = token["access_token"]
                st.session_state["username"] = username
                _rerun()

    st.divider()
    st.header("Backend")
    st.caption(API_BASE)

# -----------------
# Post a job
# -----------------
me_name: Optional[str] = st.session_state.get("username") if st.session_state.get("auth_token") else None

if me_name:
    with st.expander("Post a job", expanded=False):
        with st.form("post_job", clear_on_submit=True):
            description = st.text_area("Description")
            image_location = st.text_input("Image URL")
            submitted = st.form_submit_button("Post")
        if submitted:
            try:
                res = api_call("POST", "/jobs", {"description": description, "imageLocation": image_location})
            except ApiError as e:
                st.error(f"Posting failed: {e}")
            else:
                st.success(f"Posted job {res['createdId']}")

# -----------------
# Board
# -----------------
st.subheader("Jobs")
available_only = st.toggle("Only show available jobs", value=True)

try:
    jobs: List[Dict[str, Any]] = api_call("GET", f"/jobs?available={'true' if available_only else 'false'}")
except ApiError as e:
    st.error(f"Could not load jobs: {e}")
    jobs = []

if not jobs:
    st.info("No jobs to show.")

for job in jobs:
    with st.container(border=True):
        cols = st.columns([1, 3, 2])
        if job.get("imageLocation"):
            cols[0].image(job["imageLocation"], use_container_width=True)
        cols[1].markdown(f"**{job['description']}**")
        cols[1].caption(f"Posted by {job['author']} · id {job['id']}")
        cols[1].write(f"Runner: {job['runner']}" if job["runner"] else "Available")

        if not me_name:
            continue
        job_id = job["id"]
        if not job["runner"]:
            if cols[2].button("Check out", key=f"out-{job_id}"):
                _run_action("Check out", "POST", f"/jobs/{job_id}/checkout")
        elif job["runner"] == me_name:
            if cols[2].button("Check in", key=f"in-{job_id}"):
                _run_action("Check in", "PUT", f"/jobs/{job_id}/checkin")
        if job["author"] == me_name:
            if cols[2].button("Delete", key=f"del-{job_id}"):
                _run_action("Delete", "DELETE", f"/jobs/{job_id}")
