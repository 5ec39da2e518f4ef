from __future__ import annotations

from typing import Sequence

import streamlit as st

from config.settings import Settings
from partnership_map.map_state import MapViewState
from partnership_map.navigation import DetailNavigator
from partnership_map.presentation import LISTING_CSS, render_detail_html
from partnership_map.records import PartnershipRecord


def _step(records: Sequence[PartnershipRecord], settings: Settings, forward: bool) -> None:
    navigator: DetailNavigator = st.session_state["navigator"]
    map_state: MapViewState = st.session_state["map_state"]
    index = navigator.next() if forward else navigator.previous()
    if 0 <= index < len(records):
        map_state.activate_marker(index)
        map_state.focus(records[index].location, settings.focus_zoom)


def render_detail_panel(records: Sequence[PartnershipRecord], settings: Settings) -> None:
    navigator: DetailNavigator = st.session_state["navigator"]
    prev_col, next_col = st.columns(2)
    with prev_col:
        st.button(
            "‹ Previous",
            on_click=_step,
            args=(records, settings, False),
            disabled=not records,
            key="detail_prev",
            use_container_width=True,
        )
    with next_col:
        st.button(
            "Next ›",
            on_click=_step,
            args=(records, settings, True),
            disabled=not records,
            key="detail_next",
            use_container_width=True,
        )

    if navigator.has_selection and navigator.index < len(records):
        st.markdown(
            LISTING_CSS + render_detail_html(records[navigator.index]),
            unsafe_allow_html=True,
        )
        st.caption(f"{navigator.index + 1} of {len(records)}")
    elif records:
        st.info("Click a marker to see an institution's partnerships.")
    else:
        st.info("No institutions match the current filters.")
