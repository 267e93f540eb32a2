"""Shared Streamlit helpers for the roster views."""
from typing import Callable, List, Optional

import streamlit as st

from afterschool.models.types import GRADES, SUB_CLASSES, WEEKDAYS, Grade, SubClass, Weekday

NO_CHOICE = "—"


def confirm_twice(key: str, message: str = "Click again to confirm. This cannot be undone.") -> Callable[[], bool]:
    """Confirmation for destructive buttons: the first click arms, the second confirms."""
    def confirm() -> bool:
        flag = f"confirm_{key}"
        if st.session_state.get(flag, False):
            st.session_state[flag] = False
            return True
        st.session_state[flag] = True
        st.warning(message)
        return False
    return confirm


def grade_select(label: str, key: str) -> Optional[Grade]:
    options: List[Optional[Grade]] = [None, *GRADES]
    return st.selectbox(label, options, key=key, format_func=lambda g: NO_CHOICE if g is None else g.label)


def sub_class_select(label: str, key: str) -> Optional[SubClass]:
    options: List[Optional[SubClass]] = [None, *SUB_CLASSES]
    return st.selectbox(label, options, key=key, format_func=lambda s: NO_CHOICE if s is None else s.value)


def day_select(label: str, key: str, index: int = 0) -> Optional[Weekday]:
    options: List[Optional[Weekday]] = [None, *WEEKDAYS]
    return st.selectbox(label, options, index=index, key=key,
                        format_func=lambda d: NO_CHOICE if d is None else d.value)


def color_swatch(color: str) -> str:
    return f'<span style="display:inline-block;width:0.8em;height:0.8em;border-radius:50%;background:{color}"></span>'
