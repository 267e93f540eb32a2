import streamlit as st

from afterschool.config import get_config
from afterschool.utils.loaders import activities_template_csv
from afterschool.utils.state import RosterStore


def main(store: RosterStore) -> None:
    st.header("Activities")
    config = get_config()

    st.subheader("Add a new activity")
    col1, col2, col3 = st.columns([4, 1, 1])
    with col1:
        name = st.text_input("Activity name", placeholder="e.g., Yoga", key="new_activity")
    with col2:
        color = st.color_picker("Color", value=config.default_activity_color, key="new_activity_color")
    with col3:
        if st.button("Add"):
            store.add_activity_to_catalog(name, color)
            st.rerun()

    st.download_button("Download activities template (CSV)", activities_template_csv(),
                       file_name="lila_activities_template.csv", mime="text/csv")

    st.subheader("Existing activities")
    catalog = store.catalog
    if not catalog:
        st.info("No activities yet. Add your first above.")
        return
    for activity in catalog:
        col1, col2, col3 = st.columns([4, 1, 1])
        col1.write(activity)
        current = store.color_for(activity, config.fallback_activity_color)
        picked = col2.color_picker("Color", value=current, key=f"color_{activity}", label_visibility="collapsed")
        if picked != current:
            store.set_activity_color(activity, picked)
        if col3.button("Delete", key=f"delete_activity_{activity}"):
            store.remove_activity_from_catalog(activity)
            st.rerun()
