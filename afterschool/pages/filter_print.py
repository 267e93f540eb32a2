import streamlit as st

from afterschool.config import get_config
from afterschool.models.types import GRADES, SUB_CLASSES, SortKey
from afterschool.utils.filters import (
    FilterCriteria,
    filter_roster,
    flatten_rows,
    rows_to_dataframe,
    style_activity_colors,
)
from afterschool.utils.state import RosterStore
from afterschool.utils.ui import day_select

SORT_LABELS = {SortKey.NAME: "Name", SortKey.GRADE: "Grade", SortKey.SUB_CLASS: "Subclass"}


def main(store: RosterStore) -> None:
    st.header("Filter & Print")
    config = get_config()

    col1, col2, col3 = st.columns(3)
    with col1:
        query = st.text_input("Search", placeholder="Name or ID…", key="filter_query")
        grades = st.multiselect("Grades", GRADES, default=list(GRADES),
                                format_func=lambda g: g.label, key="filter_grades")
    with col2:
        sub_classes = st.multiselect("Subclasses", SUB_CLASSES, default=list(SUB_CLASSES),
                                     format_func=lambda s: s.value, key="filter_subs")
        activity = st.selectbox("Activity", ["", *store.catalog], key="filter_activity",
                                format_func=lambda a: a or "All activities")
    with col3:
        day = day_select("Day", key="filter_day")
        sort_by = st.radio("Sort by", list(SortKey), format_func=SORT_LABELS.get,
                           horizontal=True, key="filter_sort")

    criteria = FilterCriteria(
        query=query,
        grades=frozenset(grades),
        sub_classes=frozenset(sub_classes),
        activity_name=activity or None,
        day=day,
        sort_by=sort_by,
    )
    rows = flatten_rows(filter_roster(store.students, criteria), store.activity_colors,
                        config.fallback_activity_color)
    if not rows:
        st.info("No students match these filters.")
        return

    df = rows_to_dataframe(rows)
    st.caption(f"{len(df)} rows")
    st.dataframe(style_activity_colors(df, rows), hide_index=True, use_container_width=True)
    st.download_button("Download / Print (CSV)", df.to_csv(index=False),
                       file_name="filtered_results.csv", mime="text/csv")
