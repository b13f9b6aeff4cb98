from __future__ import annotations
import logging
import streamlit as st
import pandas as pd
from checkins.ingest import load_records
from checkins.views import (build_dashboard, preview_records, visit_history, records_frame, counts_frame,
                            history_frame, active_frame, BREAKDOWN_TITLES)
from checkins.dedupe import profile_key, record_name
from checkins.utils import load_rules, preview_limit

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

RULES = load_rules()
PARSE_ERROR = "Failed to parse the Excel file. Please verify the template and try again."
REQUIRED_COLUMNS = [
    "Student Name", "Gender", "Age", "Team Name", "Team Number", "School Name", "County",
    "Home Zip Code", "Grade", "Check-In Date", "Check-Out Date", "Elapsed Time (min)",
]

st.set_page_config(page_title="Student Insights", layout="wide")
st.title("Student Insights Dashboard")
st.caption("Upload your check-in export to explore demographics, engagement, and attendance trends.")
# =========================

# Upload
# =========================
upload = st.file_uploader("Select Excel file", type=["xlsx", "xls"], accept_multiple_files=False)

with st.expander("Required Columns", expanded=not upload):
    st.markdown("\n".join(f"- {c}" for c in REQUIRED_COLUMNS))

if not upload:
    st.stop()

st.write(f"Loaded: {upload.name}")
try:
    students = load_records(upload.getvalue(), upload.name)
except Exception:
    logger.exception("Could not read %s", upload.name)
    st.error(PARSE_ERROR)
    students = []

if not students:
    st.stop()

views = build_dashboard(students)

c1, c2 = st.columns(2)
with c1:
    st.metric("Unique Students", f"{views['unique_students']:,}")
with c2:
    st.metric("Total Check-ins (Year)", f"{views['total_check_ins']:,}")
# =========================

# Uploaded records
# =========================
st.subheader("Uploaded Records")
limit = preview_limit(RULES)
rows, total_rows = preview_records(students, limit=limit)
st.dataframe(records_frame(rows), width="stretch", hide_index=True)
if total_rows > limit:
    st.caption(f"Showing first {limit} records.")

if rows:
    options = {profile_key(r): record_name(r) for r in rows}
    picked = st.selectbox(
        "All check-ins/outs for",
        [""] + list(options.keys()),
        format_func=lambda k: options.get(k, "Select a student"),
    )
    if picked:
        entries = visit_history(students, picked)
        if entries:
            st.dataframe(history_frame(entries), width="stretch", hide_index=True)
        else:
            st.info("No records found")
# =========================

# Currently checked in
# =========================
st.subheader("Currently Checked-in")
active = views["active_check_ins"]
by_id = {a["id"]: a for a in active}
sel = st.selectbox(
    "Student",
    [""] + list(by_id.keys()),
    format_func=lambda k: by_id[k]["name"] if k else ("Select a student" if active else "No active check-ins"),
)
if sel:
    st.markdown(f"**{by_id[sel]['name']}**")
    st.dataframe(active_frame(by_id[sel]), width="stretch", hide_index=True)
# =========================

# Breakdowns
# =========================
breakdowns = views["breakdowns"]
cols = st.columns(2)
shown = 0
for field, title in BREAKDOWN_TITLES.items():
    counts = breakdowns.get(field, {})
    if not counts:
        continue
    with cols[shown % 2]:
        st.markdown(f"#### Breakdown by {title}")
        st.bar_chart(counts_frame(counts, title).set_index(title))
    shown += 1
# =========================

# Activity over time
# =========================
st.subheader("Activity Over Time")


def _bucket_view(counts, label: str, key: str):
    mode = st.radio("View", ["Table", "Chart"], horizontal=True, key=key)
    df = counts_frame(counts, label, value="Check-ins")
    if mode == "Table":
        st.dataframe(df, width="stretch", hide_index=True)
    else:
        # keep chronological order instead of sorting labels
        df[label] = pd.Categorical(df[label], categories=list(counts.keys()), ordered=True)
        st.bar_chart(df.set_index(label))


m_col, w_col = st.columns(2)
with m_col:
    st.markdown("#### By Month")
    _bucket_view(views["monthly"], "Month", "mode_month")
with w_col:
    st.markdown("#### By Week")
    _bucket_view(views["weekly"], "Week", "mode_week")
