from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import requests

from partnership_map.records import PartnershipRecord

logger = logging.getLogger(__name__)


def load_boundaries(source: str, timeout_s: float = 20.0) -> Optional[Dict[str, Any]]:
    """Country polygons as a GeoJSON FeatureCollection, or None when unavailable.

    The map still renders institution markers without boundaries, so failures
    are logged rather than raised.
    """
    if not source:
        return None
    try:
        if source.startswith("http://") or source.startswith("https://"):
            resp = requests.get(source, timeout=timeout_s)
            resp.raise_for_status()
            geojson = resp.json()
        else:
            geojson = json.loads(Path(source).read_text(encoding="utf-8"))
    except (requests.RequestException, OSError, ValueError) as exc:
        logger.warning("Could not load country boundaries from %s: %s", source, exc)
        return None
    if not isinstance(geojson, dict) or not isinstance(geojson.get("features"), list):
        logger.warning("Country boundaries from %s are not a FeatureCollection", source)
        return None
    return geojson


def boundary_names(geojson: Optional[Dict[str, Any]], name_property: str) -> List[str]:
    if not geojson:
        return []
    names = []
    for feature in geojson.get("features", []):
        name = (feature.get("properties") or {}).get(name_property)
        if name:
            names.append(str(name))
    return names


def count_records_in_country(records: Sequence[PartnershipRecord], country: str) -> int:
    return sum(1 for record in records if record.country == country)


def country_counts(records: Sequence[PartnershipRecord]) -> Dict[str, int]:
    return dict(Counter(record.country for record in records))


def unmatched_countries(
    records: Sequence[PartnershipRecord], names: Iterable[str]
) -> List[str]:
    known = set(names)
    return sorted({record.country for record in records if record.country not in known})


def log_unmatched_countries(records: Sequence[PartnershipRecord], names: Iterable[str]) -> None:
    missing = unmatched_countries(records, names)
    if missing:
        logger.warning(
            "%d record countries have no boundary polygon and cannot be counted by map click: %s",
            len(missing),
            ", ".join(missing),
        )
