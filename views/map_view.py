from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import streamlit as st
from streamlit_plotly_events import plotly_events

from config.settings import Settings
from partnership_map.countries import count_records_in_country
from partnership_map.map_state import MapViewState
from partnership_map.navigation import DetailNavigator
from partnership_map.records import PartnershipRecord
from partnership_map.viz import build_partnership_map, resolve_map_click
from views.detail_panel import render_detail_panel

logger = logging.getLogger(__name__)

MAP_HEIGHT = 650


def _apply_click(
    events: object,
    fig,
    records: Sequence[PartnershipRecord],
    map_state: MapViewState,
    navigator: DetailNavigator,
) -> bool:
    if not events:
        return False
    # A fresh component key drops the consumed event so the next click, even on
    # the same point, arrives as new.
    st.session_state["map_event_key"] = st.session_state.get("map_event_key", 0) + 1
    click = resolve_map_click(events, fig)
    if click is None:
        return False
    if click.kind == "country":
        logger.debug("Country clicked: %s", click.country)
        map_state.click_country(click.country)
    elif click.kind == "marker" and click.index is not None and click.index < len(records):
        logger.debug("Marker clicked: %s", records[click.index].institution)
        map_state.activate_marker(click.index)
        map_state.unhover()
        navigator.select(click.index)
    return True


def render_map_view(
    records: Sequence[PartnershipRecord],
    all_records: Sequence[PartnershipRecord],
    boundaries: Optional[Dict[str, Any]],
    settings: Settings,
) -> None:
    map_state: MapViewState = st.session_state["map_state"]
    navigator: DetailNavigator = st.session_state["navigator"]

    col_map, col_side = st.columns([3, 1])
    with col_map:
        fig = build_partnership_map(
            records,
            boundaries,
            map_state,
            name_property=settings.boundary_name_property,
            tile_url=settings.map_tile_url,
            mapbox_style=settings.mapbox_style,
            mapbox_token=settings.mapbox_token,
            height=MAP_HEIGHT,
        )
        events = plotly_events(
            fig,
            click_event=True,
            hover_event=False,
            select_event=False,
            override_height=MAP_HEIGHT,
            override_width="100%",
            key=f"partnership-map-{st.session_state.get('map_event_key', 0)}",
        )
        if _apply_click(events, fig, records, map_state, navigator):
            st.rerun()
        if boundaries is None:
            st.caption("Country outlines are unavailable; showing institutions only.")

    with col_side:
        st.button("Reset map view", on_click=map_state.reset_view, key="reset_map_view")
        st.metric("Total Number of Partnerships", len(all_records))
        st.caption("*Click on the map for country specific numbers.")
        if map_state.selected_country:
            st.metric(
                f"Number of Partnerships in {map_state.selected_country}",
                count_records_in_country(all_records, map_state.selected_country),
            )
            st.button("Clear highlight", on_click=map_state.unhover, key="clear_highlight")
        st.divider()
        render_detail_panel(records, settings)
