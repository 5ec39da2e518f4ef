from __future__ import annotations

from typing import Sequence

import streamlit as st

from partnership_map.filters import country_options
from partnership_map.records import PartnershipRecord
from partnership_map.table import (
    DEFAULT_PAGE_SIZE,
    PAGE_SIZE_OPTIONS,
    TABLE_COLUMNS,
    filter_table,
    paginate,
    records_to_table,
)


def render_table_view(
    all_records: Sequence[PartnershipRecord],
    filtered_records: Sequence[PartnershipRecord],
) -> None:
    use_sidebar = st.toggle("Apply sidebar filters", value=False, key="table_use_sidebar")
    records = filtered_records if use_sidebar else all_records
    df = records_to_table(records)

    filters = {}
    filter_cols = st.columns(len(TABLE_COLUMNS))
    for column, col in zip(TABLE_COLUMNS, filter_cols):
        with col:
            if column == "Country":
                options = [""] + country_options(records)
                if st.session_state.get("table_filter_Country", "") not in options:
                    st.session_state["table_filter_Country"] = ""
                choice = st.selectbox(
                    "Country",
                    options=options,
                    format_func=lambda value: value or "All",
                    key="table_filter_Country",
                )
                filters[column] = choice
            else:
                filters[column] = st.text_input(
                    column,
                    key=f"table_filter_{column}",
                    placeholder=f"Filter {column}",
                )

    filtered = filter_table(df, filters)

    size_col, page_col, info_col = st.columns([1, 1, 2])
    with size_col:
        page_size = st.selectbox(
            "Show",
            options=PAGE_SIZE_OPTIONS,
            index=PAGE_SIZE_OPTIONS.index(DEFAULT_PAGE_SIZE),
            key="table_page_size",
        )
    page_count = paginate(filtered, 1, page_size).page_count
    if st.session_state.get("table_page", 1) > page_count:
        st.session_state["table_page"] = page_count
    with page_col:
        page_number = st.number_input(
            "Page",
            min_value=1,
            max_value=page_count,
            step=1,
            key="table_page",
        )
    page = paginate(filtered, page_number, page_size)
    with info_col:
        st.caption(f"Page {page.page} of {page.page_count} · {page.total_rows} rows")

    st.dataframe(
        page.df,
        hide_index=True,
        use_container_width=True,
        column_config={
            "Link": st.column_config.LinkColumn("Link"),
        },
    )
