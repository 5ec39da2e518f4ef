from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import pandas as pd

from partnership_map.records import PartnershipRecord

TABLE_COLUMNS = ["Name", "City", "Country", "Description", "Link"]
PAGE_SIZE_OPTIONS = [10, 25, 50, 100]
DEFAULT_PAGE_SIZE = 10


@dataclass
class Page:
    df: pd.DataFrame
    page: int
    page_count: int
    total_rows: int


def records_to_table(records: Sequence[PartnershipRecord]) -> pd.DataFrame:
    rows = [
        {
            "Name": record.institution,
            "City": record.city,
            "Country": record.country,
            "Description": entry.description,
            "Link": entry.url,
        }
        for record in records
        for entry in record.partnerships
    ]
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


def filter_table(df: pd.DataFrame, filters: Optional[Dict[str, str]]) -> pd.DataFrame:
    mask = pd.Series(True, index=df.index)
    for column, value in (filters or {}).items():
        if column not in df.columns:
            raise KeyError(f"Unknown table column: {column}")
        value = (value or "").strip()
        if not value:
            continue
        mask &= (
            df[column]
            .fillna("")
            .astype(str)
            .str.contains(value, case=False, regex=False)
        )
    return df[mask]


def paginate(df: pd.DataFrame, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    total_rows = int(df.shape[0])
    page_count = max(math.ceil(total_rows / page_size), 1)
    page = min(max(int(page), 1), page_count)
    start = (page - 1) * page_size
    return Page(
        df=df.iloc[start : start + page_size],
        page=page,
        page_count=page_count,
        total_rows=total_rows,
    )
