# ui/board_panel.py
from datetime import date, datetime

import streamlit as st

from rollup.actions import (
    add_subtask, add_task, complete_milestone, complete_task, delete_milestone, delete_task,
    set_subtask_done, start_task, update_milestone, update_task,
)
from rollup.cascade import CascadeResult
from rollup.critical import detect_critical, flags_by_task
from rollup.errors import LifecycleError, StoreWriteError
from rollup.lanes import group_lanes
from rollup.lifecycle import all_subtasks_done
from rollup.store import MILESTONES, SUBTASKS, TASKS, EntityStore
from utils.timeline import progress_summary


def _report(result: CascadeResult):
    for w in result.warnings:
        st.warning(w)


def _run(action, *args, **kwargs):
    """Run a mutation and show its outcome; returns True if the UI should rerun."""
    try:
        out = action(*args, **kwargs)
    except (LifecycleError, ValueError) as e:
        st.warning(str(e))
        return False
    except StoreWriteError as e:
        st.error(f"Save failed, totals may be stale until the next edit: {e}")
        return False
    _report(out[1] if isinstance(out, tuple) else out)
    return True


def render_milestone_header(store: EntityStore, milestone_id: int, now: datetime):
    m = store.get_by_id(MILESTONES, milestone_id)
    if m is None:
        st.info("Milestone not found.")
        return
    summary = progress_summary(m)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Actual", f"{summary['actual_progress']:.2f}%",
              f"{summary['schedule_variance']:+.2f} vs plan")
    c2.metric("Planned", f"{summary['planned_progress']:.2f}%")
    c3.metric("Cost", f"{summary['actual_cost']:,.2f}",
              f"{summary['cost_variance']:+,.2f} left")
    c4.metric("Status", m.status.replace("_", " "))
    if m.actual_end is None and st.button("Complete milestone", key=f"cm_{m.id}"):
        if _run(complete_milestone, store, m.id, now=now):
            st.rerun()

    with st.expander("Edit milestone"):
        with st.form(f"edit_ms_{m.id}"):
            name = st.text_input("Name", value=m.name)
            weight = st.number_input("Weight", min_value=0.0, value=float(m.weight))
            save = st.form_submit_button("Save")
        if save and _run(update_milestone, store, m.id, now=now, name=name, weight=weight):
            st.rerun()
        if st.button("Delete milestone", key=f"dm_{m.id}") and _run(delete_milestone, store, m.id, now=now):
            st.rerun()


def render_board_panel(store: EntityStore, milestone_id: int, today: date, now: datetime):
    st.subheader("Task board")
    render_milestone_header(store, milestone_id, now)

    tasks = store.list_by_parent(TASKS, milestone_id)
    flags = flags_by_task(detect_critical(tasks, today))

    with st.form(f"new_task_{milestone_id}", clear_on_submit=True):
        t_name = st.text_input("Task name")
        t_weight = st.number_input("Weight", min_value=0.0, value=0.0, step=5.0)
        submit = st.form_submit_button("Add task")
    if submit and t_name and _run(add_task, store, milestone_id, t_name, weight=t_weight, now=now):
        st.rerun()

    for group, lane in group_lanes(tasks):
        st.markdown(f"**Lane {group if group is not None else '—'}**")
        cols = st.columns(len(lane))
        for col, t in zip(cols, lane):
            with col:
                _render_task_card(store, t, flags[t.id], now)


def _render_task_card(store: EntityStore, t, flag, now: datetime):
    badge = " 🔥" if flag.is_critical else ""
    st.markdown(f"🧩 **{t.name}**{badge} — {t.status.replace('_', ' ')}")
    if flag.is_critical:
        st.caption(flag.reason)
    st.progress(min(1.0, t.progress / 100.0), text=f"{t.progress:.0f}% (plan {t.planned_progress:.0f}%)")

    subs = store.list_by_parent(SUBTASKS, t.id)
    for s in subs:
        checked = st.checkbox(s.name, value=s.is_done, key=f"sd_{s.id}")
        if checked != s.is_done and _run(set_subtask_done, store, s.id, checked, now=now):
            st.rerun()

    if t.actual_start is None:
        if st.button("Start", key=f"start_{t.id}") and _run(start_task, store, t.id, now=now):
            st.rerun()
    elif t.actual_end is None and all_subtasks_done(subs):
        if st.button("Complete", key=f"done_{t.id}") and _run(complete_task, store, t.id, now=now):
            st.rerun()

    with st.expander("Edit task"):
        with st.form(f"edit_task_{t.id}"):
            name = st.text_input("Name", value=t.name, key=f"tn_{t.id}")
            weight = st.number_input("Weight", min_value=0.0, value=float(t.weight), key=f"tw_{t.id}")
            save = st.form_submit_button("Save")
        if save and _run(update_task, store, t.id, now=now, name=name, weight=weight):
            st.rerun()
        if st.button("Delete task", key=f"dt_{t.id}") and _run(delete_task, store, t.id, now=now):
            st.rerun()

    with st.expander("Add deliverable"):
        with st.form(f"new_sub_{t.id}", clear_on_submit=True):
            name = st.text_input("Title", key=f"sn_{t.id}")
            weight = st.number_input("Weight", min_value=0.0, value=0.0, key=f"sw_{t.id}")
            p_start = st.date_input("Planned start", value=now.date(), key=f"sps_{t.id}")
            p_end = st.date_input("Planned end", value=now.date(), key=f"spe_{t.id}")
            budget = st.number_input("Budgeted cost", min_value=0.0, value=0.0, key=f"sb_{t.id}")
            ok = st.form_submit_button("Add")
        if ok and name and _run(add_subtask, store, t.id, name, now=now, weight=weight,
                                planned_start=p_start, planned_end=p_end, budgeted_cost=budget):
            st.rerun()
