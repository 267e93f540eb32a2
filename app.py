import sys
from pathlib import Path

import streamlit as st

# Add the project root to Python path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from afterschool.config import get_config  # noqa: E402
from afterschool.logging import get_logger, setup_logging  # noqa: E402

config = get_config()

# Set page config - must be the first Streamlit command
st.set_page_config(
    page_title=config.page_title,
    page_icon="🏫",
    layout="wide"
)

VIEWS = ["Filter & Print", "Manage Students", "Import", "Activities"]


def get_store():
    """One roster store per browser session."""
    from afterschool.utils.state import RosterStore
    from afterschool.utils.storage import JsonFileStore

    if "store" not in st.session_state:
        st.session_state.store = RosterStore(JsonFileStore(config.state_dir))
    return st.session_state.store


def main():
    setup_logging(json_output=config.log_json, log_level=config.log_level)
    log = get_logger(__name__)
    try:
        from afterschool.pages import activities, filter_print, import_class, manage
    except ImportError as e:
        log.error("app_import_failed", error=str(e))
        st.error(f"Failed to initialize application: {e}")
        st.error("Please ensure all dependencies are installed and the project structure is correct.")
        st.stop()

    store = get_store()
    st.title(config.page_title)

    st.sidebar.title("Navigation")
    view = st.sidebar.radio("Go to", VIEWS)
    st.sidebar.metric("Students", len(store.students))
    st.sidebar.metric("Activities", len(store.catalog))

    if view == "Filter & Print":
        filter_print.main(store)
    elif view == "Manage Students":
        manage.main(store)
    elif view == "Import":
        import_class.main(store)
    else:
        activities.main(store)


if __name__ == "__main__":
    main()
