import streamlit as st

from afterschool.errors import RosterError
from afterschool.models.types import WEEKDAYS
from afterschool.utils.loaders import import_template_csv
from afterschool.utils.merge import ImportStage
from afterschool.utils.state import RosterStore
from afterschool.utils.ui import day_select, grade_select, sub_class_select


def get_stage() -> ImportStage:
    if "import_stage" not in st.session_state:
        st.session_state.import_stage = ImportStage()
    return st.session_state.import_stage


def show_staged_rows(stage: ImportStage, catalog) -> None:
    st.subheader(f"Staged rows ({len(stage.rows)})")
    if st.button("Clear list"):
        stage.clear()
        st.rerun()
    for row in list(stage.rows):
        cols = st.columns([3, 2, 3, 2, 1])
        cols[0].write(f"{row.first} {row.last}".strip())
        grade = row.grade or stage.default_grade
        sub_class = row.sub_class or stage.default_sub_class
        cols[1].write(f"{grade.label if grade else '?'}/{sub_class.value if sub_class else '?'}")
        options = ["", *catalog]
        activity = cols[2].selectbox("Activity", options, key=f"row_act_{row.row_id}",
                                     label_visibility="collapsed",
                                     index=options.index(row.activity) if row.activity in options else 0)
        with cols[3]:
            day = day_select("Day", key=f"row_day_{row.row_id}",
                             index=WEEKDAYS.index(row.day) + 1 if row.day else 0)
        if activity != row.activity or day != row.day:
            stage.update_row(row.row_id, activity=activity, day=day)
        if cols[4].button("Delete", key=f"row_del_{row.row_id}"):
            stage.delete_row(row.row_id)
            st.rerun()


def main(store: RosterStore) -> None:
    st.header("Import")
    stage = get_stage()

    col1, col2 = st.columns(2)
    with col1:
        grade = grade_select("Grade", key="import_grade")
    with col2:
        sub_class = sub_class_select("Subclass", key="import_sub")
    stage.set_defaults(grade, sub_class)

    names_text = st.text_area("Class list", placeholder="One name per line or comma-separated", key="import_names")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Preview class"):
            try:
                stage.preview_class(names_text, grade, sub_class)
            except RosterError as e:
                st.error(str(e))
    with col2:
        st.download_button("Download template (CSV)", import_template_csv(),
                           file_name="lila_import_template.csv", mime="text/csv")

    uploaded = st.file_uploader("Upload roster CSV", type=["csv"], key="import_csv")
    if uploaded is not None and st.button("Load CSV"):
        try:
            stage.load_csv(uploaded.getvalue().decode("utf-8-sig"))
        except (RosterError, UnicodeDecodeError) as e:
            st.error(str(e))

    if stage.rows:
        show_staged_rows(stage, store.catalog)

    if st.button("Add to database", type="primary"):
        try:
            summary = stage.commit(store)
            st.success(f"Class imported: {summary.processed} students ({summary.created} added, "
                       f"{summary.updated} updated), {summary.skipped} skipped. "
                       "You can now see them in Filter & Print.")
        except RosterError as e:
            st.error(str(e))
