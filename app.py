import logging
from typing import Any, Dict, Optional, Tuple

import streamlit as st

from config.app_metadata import APP_TITLE
from config.settings import Settings, configure_logging, load_settings
from partnership_map.countries import boundary_names, load_boundaries, log_unmatched_countries
from partnership_map.filters import (
    ALL_TYPES,
    FilterSelection,
    country_options,
    filter_records,
    partnership_type_options,
    sponsor_options,
)
from partnership_map.records import PartnershipRecord, RecordLoadError, load_records
from views.about import render_about
from views.listing_view import render_listing_view
from views.map_view import render_map_view
from views.session import init_session, reset_filters, seed_from_query_params, sync_displayed
from views.table_view import render_table_view

st.set_page_config(page_title=APP_TITLE, layout="wide")

SETTINGS = load_settings()
configure_logging(SETTINGS)
logger = logging.getLogger("partnership_map.app")


@st.cache_data(show_spinner=False)
def get_records(source: str, timeout_s: float) -> Tuple[PartnershipRecord, ...]:
    return load_records(source, timeout_s=timeout_s)


@st.cache_data(show_spinner=False)
def get_boundaries(source: str, timeout_s: float) -> Optional[Dict[str, Any]]:
    return load_boundaries(source, timeout_s=timeout_s)


def _load_store(settings: Settings) -> Tuple[PartnershipRecord, ...]:
    try:
        return get_records(settings.data_source, settings.http_timeout_s)
    except RecordLoadError as exc:
        logger.exception("Partnership data could not be loaded")
        st.error(f"Partnership data could not be loaded: {exc}. Reload the page to try again.")
        return ()


def _sidebar_filters(records: Tuple[PartnershipRecord, ...]) -> FilterSelection:
    options = {
        "filter_country": [""] + country_options(records),
        "filter_partners": partnership_type_options(records),
        "filter_sponsors": [""] + sponsor_options(records),
    }
    seed_from_query_params(options)
    with st.sidebar:
        st.header("Filters")
        country = st.selectbox(
            "Country",
            options=options["filter_country"],
            format_func=lambda value: value or "All countries",
            key="filter_country",
        )
        partnership_type = st.selectbox(
            "Partnership type",
            options=options["filter_partners"],
            format_func=lambda value: "All partnership types" if value == ALL_TYPES else value,
            key="filter_partners",
        )
        sponsor = st.selectbox(
            "Sponsoring department",
            options=options["filter_sponsors"],
            format_func=lambda value: value or "All departments",
            key="filter_sponsors",
        )
        st.button("Reset filters", on_click=reset_filters, key="reset_filters")
    return FilterSelection(country=country, partnership_type=partnership_type, sponsor=sponsor)


st.title(APP_TITLE)

init_session(SETTINGS)
records = _load_store(SETTINGS)
boundaries = get_boundaries(SETTINGS.boundaries_url, SETTINGS.http_timeout_s)
if records and not st.session_state.get("join_checked"):
    st.session_state["join_checked"] = True
    log_unmatched_countries(records, boundary_names(boundaries, SETTINGS.boundary_name_property))

selection = _sidebar_filters(records)
result = filter_records(records, selection)
displayed = result.records

sync_displayed(selection, displayed)

st.caption(result.summary)

map_tab, listing_tab, table_tab, about_tab = st.tabs(
    ["Map", "Partner listing", "Data table", "About"]
)
with map_tab:
    render_map_view(displayed, records, boundaries, SETTINGS)
with listing_tab:
    render_listing_view(result, selection)
with table_tab:
    render_table_view(records, displayed)
with about_tab:
    render_about(SETTINGS, len(records))
