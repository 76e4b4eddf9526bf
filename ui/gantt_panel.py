# ui/gantt_panel.py
from datetime import date

import plotly.express as px
import streamlit as st

from rollup.store import EntityStore
from utils.timeline import timeline_df_for_project

STATUS_COLORS = {
    "pending": "#9CA3AF",      # gray-400
    "open": "#9CA3AF",
    "in_progress": "#2563EB",  # blue-600
    "completed": "#16A34A",    # green-600
}

def render_gantt_panel(store: EntityStore, project_id: int, today: date):
    st.subheader("Timeline")
    df = timeline_df_for_project(store, project_id, today)
    if df.empty:
        st.info("Add milestones, tasks and deliverables with planned dates to see the timeline.")
        return
    fig = px.timeline(df, x_start="Start", x_end="Finish", y="Item",
                      color="Status", color_discrete_map=STATUS_COLORS,
                      hover_data=["Type", "Planned %", "Actual %", "Reason"])
    fig.update_yaxes(autorange="reversed")
    fig.add_vline(x=today, line_dash="dot", line_color="#DC2626")
    st.plotly_chart(fig, use_container_width=True, config={"displaylogo": False})
