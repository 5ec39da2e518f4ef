from __future__ import annotations

import streamlit as st

from partnership_map.deeplink import build_deeplink
from partnership_map.filters import FilterResult, FilterSelection
from partnership_map.presentation import LISTING_CSS, render_listing_html, render_summary_html


def render_listing_view(result: FilterResult, selection: FilterSelection) -> None:
    st.markdown(
        LISTING_CSS + render_summary_html(result) + render_listing_html(result),
        unsafe_allow_html=True,
    )
    link = build_deeplink(selection)
    if link:
        with st.expander("Link to this selection"):
            st.code(link, language=None)
