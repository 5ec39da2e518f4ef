from __future__ import annotations

import logging
from typing import Dict, List, Sequence

import streamlit as st

from config.settings import Settings
from partnership_map.deeplink import parse_deeplink, resolve_deeplink
from partnership_map.filters import ALL_TYPES, FilterSelection
from partnership_map.map_state import MapViewState
from partnership_map.navigation import DetailNavigator
from partnership_map.records import PartnershipRecord

logger = logging.getLogger(__name__)


def init_session(settings: Settings) -> None:
    if "map_state" not in st.session_state:
        st.session_state["map_state"] = MapViewState(
            default_center=settings.default_center,
            default_zoom=settings.default_zoom,
        )
    if "navigator" not in st.session_state:
        st.session_state["navigator"] = DetailNavigator()


def seed_from_query_params(options: Dict[str, List[str]]) -> None:
    """Copy deep-link filters into the sidebar widgets on a session's first run."""
    if st.session_state.get("deeplink_applied"):
        return
    st.session_state["deeplink_applied"] = True
    selection = parse_deeplink(st.query_params.to_dict())
    if selection is None:
        return
    resolved, ignored = resolve_deeplink(
        selection,
        options["filter_country"],
        options["filter_partners"],
        options["filter_sponsors"],
    )
    for name in ignored:
        logger.warning("Ignoring deep-link %s value: not a known option (%s)", name, selection)
    st.session_state["filter_country"] = resolved.country
    st.session_state["filter_partners"] = resolved.partnership_type
    st.session_state["filter_sponsors"] = resolved.sponsor
    logger.info("Applied deep-link filters: %s", resolved)
    st.query_params.clear()


def reset_filters() -> None:
    st.session_state["filter_country"] = ""
    st.session_state["filter_partners"] = ALL_TYPES
    st.session_state["filter_sponsors"] = ""


def sync_displayed(selection: FilterSelection, displayed: Sequence[PartnershipRecord]) -> bool:
    """Reset detail navigation and the active marker when the selection changes."""
    if st.session_state.get("filters_key") == selection:
        return False
    st.session_state["filters_key"] = selection
    st.session_state["navigator"].reset(len(displayed))
    st.session_state["map_state"].deactivate_markers()
    return True
