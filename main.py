# main.py

#============================================================#
#                      Strivio Tracker                       #
#============================================================#
# Purpose     : Project → Milestone → Task → Deliverable     #
#               tracker with cascading progress, cost and    #
#               date rollups (SQLite/Postgres powered)       #
#============================================================#

import streamlit as st

import db
from rollup.milestone import recalc_milestone
from rollup.project import recalc_project
from rollup.store import MILESTONES, PROJECTS
from ui.board_panel import render_board_panel
from ui.gantt_panel import render_gantt_panel
from utils.config import log_level, timezone_name
from utils.dates import local_now
from utils.logging_setup import setup_logging

st.set_page_config(page_title="Strivio - Tracker", layout="wide",
                   initial_sidebar_state="expanded")


@st.cache_resource
def _init_once():
    setup_logging(log_level())
    db.init_db()
    return db.SQLModelStore()


store = _init_once()
now = local_now(timezone_name())
today = now.date()

# ======================  SIDEBAR  ======================
with st.sidebar:
    st.header("Projects")
    projects = db.get_projects()

    with st.form("new_project", clear_on_submit=True):
        p_name = st.text_input("New project")
        if st.form_submit_button("Create") and p_name:
            store.insert(PROJECTS, {"name": p_name})
            st.rerun()

    if not projects:
        st.info("Create a project to begin.")
        st.stop()
    project = st.selectbox("Project", projects, format_func=lambda p: p.name)

    milestones = store.list_by_parent(MILESTONES, project.id)
    with st.form("new_milestone", clear_on_submit=True):
        m_name = st.text_input("New milestone")
        m_weight = st.number_input("Weight", min_value=0.0, value=0.0, step=5.0)
        if st.form_submit_button("Add milestone") and m_name:
            m = store.insert(MILESTONES, {"project_id": project.id, "name": m_name,
                                          "weight": m_weight})
            recalc_milestone(store, m.id, now=now)
            st.rerun()

# ======================  MAIN  ======================
project = store.get_by_id(PROJECTS, project.id)
st.title(project.name)
c1, c2, c3 = st.columns(3)
c1.metric("Actual progress", f"{project.actual_progress:.2f}%")
c2.metric("Planned progress", f"{project.planned_progress:.2f}%")
c3.metric("Status", project.status.replace("_", " "))
if st.button("Recalculate project"):
    recalc_project(store, project.id, now=now)
    st.rerun()

tab_board, tab_timeline = st.tabs(["Board", "Timeline"])
with tab_board:
    if not milestones:
        st.info("Add a milestone from the sidebar.")
    else:
        milestone = st.selectbox("Milestone", milestones, format_func=lambda m: m.name)
        render_board_panel(store, milestone.id, today, now)
with tab_timeline:
    render_gantt_panel(store, project.id, today)
