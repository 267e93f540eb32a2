from datetime import datetime

import streamlit as st

from afterschool.config import get_config
from afterschool.errors import RosterError
from afterschool.utils.filters import filter_for_management
from afterschool.utils.snapshot import dumps_snapshot, loads_snapshot, snapshot_filename
from afterschool.utils.state import RosterStore
from afterschool.utils.ui import color_swatch, confirm_twice, day_select, grade_select, sub_class_select


def show_snapshot_tools(store: RosterStore) -> None:
    col1, col2, col3 = st.columns(3)
    with col1:
        st.download_button("Save data", dumps_snapshot(store.state),
                           file_name=snapshot_filename(datetime.now()), mime="application/json")
    with col2:
        uploaded = st.file_uploader("Load data", type=["json"], key="snapshot_upload")
        if uploaded is not None and st.button("Restore from file"):
            try:
                store.restore(loads_snapshot(uploaded.getvalue().decode("utf-8")))
                st.success("Data imported successfully.")
            except (RosterError, UnicodeDecodeError) as e:
                st.error(str(e))
    with col3:
        if st.button("Clear all students"):
            store.clear_all(confirm=confirm_twice("clear_all", "Clear ALL students? Click again to confirm."))


def main(store: RosterStore) -> None:
    st.header("Manage Students")
    config = get_config()
    show_snapshot_tools(store)

    col1, col2, col3 = st.columns(3)
    with col1:
        search = st.text_input("Search", placeholder="Name or ID…", key="manage_search")
    with col2:
        grade = grade_select("Grade", key="manage_grade")
    with col3:
        sub_class = sub_class_select("Subclass", key="manage_sub")

    col1, col2 = st.columns(2)
    with col1:
        selected = st.selectbox("Activity to assign", ["", *store.catalog], key="manage_activity",
                                format_func=lambda a: a or "Select an activity")
    with col2:
        selected_day = day_select("Day", key="manage_day")

    for student in filter_for_management(store.students, search, grade, sub_class):
        with st.container(border=True):
            name_col, chips_col, action_col = st.columns([2, 4, 2])
            name_col.markdown(f"**{student.full_name}**  \n{student.class_label} · `{student.id}`")
            with chips_col:
                current = student.afterschool_activities
                if not current:
                    st.caption("None")
                for index, activity in enumerate(current):
                    color = store.color_for(activity.name, config.fallback_activity_color)
                    label = activity.name + (f" · {activity.day.value}" if activity.day else "")
                    chip, remove = st.columns([5, 1])
                    chip.markdown(f"{color_swatch(color)} {label}", unsafe_allow_html=True)
                    if remove.button("×", key=f"remove_{student.id}_{index}"):
                        store.remove_activity(student.id, activity.name, activity.day)
                        st.rerun()
            with action_col:
                if st.button("Assign", key=f"assign_{student.id}"):
                    try:
                        store.assign_activity(student.id, selected, selected_day)
                        st.rerun()
                    except RosterError as e:
                        st.error(str(e))
                if st.button("Delete", key=f"delete_{student.id}", type="primary"):
                    store.delete_student(student.id, confirm=confirm_twice(f"delete_{student.id}"))
