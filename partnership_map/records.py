from __future__ import annotations

import csv
import io
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)


class RecordLoadError(RuntimeError):
    pass


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class PartnershipEntry:
    type: str
    description: str
    program: str = ""
    in_unit: str = ""
    url: str = ""

    @property
    def sponsors(self) -> Tuple[str, ...]:
        return tuple(line.strip() for line in self.in_unit.split("\n") if line.strip())

    @property
    def has_link(self) -> bool:
        return self.url != ""


@dataclass(frozen=True)
class PartnershipRecord:
    institution: str
    country: str
    location: GeoPoint
    partnerships: Tuple[PartnershipEntry, ...]
    city: str = ""
    place: str = ""

    @property
    def place_label(self) -> str:
        if self.place:
            return self.place
        return ", ".join(part for part in (self.city, self.country) if part)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def _coordinate(value: Any, limit: float) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or abs(number) > limit:
        return None
    return number


def _geo_point(lat: Any, lng: Any) -> Optional[GeoPoint]:
    lat_value = _coordinate(lat, 90.0)
    lng_value = _coordinate(lng, 180.0)
    if lat_value is None or lng_value is None:
        return None
    return GeoPoint(lat=lat_value, lng=lng_value)


def _entry_from_json(raw: Dict[str, Any]) -> PartnershipEntry:
    return PartnershipEntry(
        type=_text(raw.get("type")),
        description=_text(raw.get("description")),
        program=_text(raw.get("program")),
        # inUnit keeps its line breaks: each line is one sponsoring department.
        in_unit=str(raw.get("inUnit") or raw.get("in_unit") or "").strip("\n"),
        url=_text(raw.get("url")),
    )


def _record_from_json(raw: Dict[str, Any]) -> Optional[PartnershipRecord]:
    location = raw.get("location")
    place = ""
    if isinstance(location, dict):
        point = _geo_point(location.get("lat"), location.get("lng", location.get("lon")))
    else:
        place = _text(location)
        point = _geo_point(raw.get("lat"), raw.get("lng", raw.get("lon")))
    if point is None:
        return None
    entries = tuple(
        _entry_from_json(item) for item in raw.get("partnerships") or [] if isinstance(item, dict)
    )
    return PartnershipRecord(
        institution=_text(raw.get("institution")),
        country=_text(raw.get("country")),
        city=_text(raw.get("city")),
        place=place,
        location=point,
        partnerships=entries,
    )


def parse_json_records(payload: Any) -> Tuple[PartnershipRecord, ...]:
    if isinstance(payload, dict):
        rows = payload.get("locations")
    else:
        rows = payload
    if not isinstance(rows, list):
        raise RecordLoadError("Expected a list of records or an object with a 'locations' list.")
    records: List[PartnershipRecord] = []
    skipped = 0
    for raw in rows:
        record = _record_from_json(raw) if isinstance(raw, dict) else None
        if record is None:
            skipped += 1
            continue
        records.append(record)
    if skipped:
        logger.info("Excluded %d records without usable coordinates", skipped)
    return tuple(records)


def parse_csv_records(text: str) -> Tuple[PartnershipRecord, ...]:
    reader = csv.DictReader(io.StringIO(text))
    missing = [col for col in ("Name", "Country", "lat", "lon") if col not in (reader.fieldnames or [])]
    if missing:
        raise RecordLoadError(f"CSV is missing required columns: {missing}")
    grouped: Dict[Tuple[str, str], Dict[str, Any]] = {}
    skipped = 0
    for row in reader:
        point = _geo_point(row.get("lat"), row.get("lon"))
        if point is None:
            skipped += 1
            continue
        key = (_text(row.get("Name")), _text(row.get("Country")))
        entry = PartnershipEntry(
            type=_text(row.get("Type")),
            description=_text(row.get("Description")),
            program=_text(row.get("Program")),
            in_unit=(row.get("Sponsor") or "").strip("\n"),
            url=_text(row.get("Link")),
        )
        if key not in grouped:
            grouped[key] = {
                "institution": key[0],
                "country": key[1],
                "city": _text(row.get("City")),
                "place": _text(row.get("place")),
                "location": point,
                "partnerships": [],
            }
        grouped[key]["partnerships"].append(entry)
    if skipped:
        logger.info("Excluded %d CSV rows without usable coordinates", skipped)
    return tuple(
        PartnershipRecord(
            institution=item["institution"],
            country=item["country"],
            city=item["city"],
            place=item["place"],
            location=item["location"],
            partnerships=tuple(item["partnerships"]),
        )
        for item in grouped.values()
    )


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def _read_source(source: str, timeout_s: float) -> str:
    if _is_url(source):
        try:
            resp = requests.get(source, timeout=timeout_s)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise RecordLoadError(f"Failed to fetch {source}: {exc}") from exc
        return resp.text
    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RecordLoadError(f"Failed to read {source}: {exc}") from exc


def parse_records(text: str, source: str = "") -> Tuple[PartnershipRecord, ...]:
    suffix = Path(source.split("?", 1)[0]).suffix.lower()
    if suffix == ".csv":
        return parse_csv_records(text)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        if suffix == ".json":
            raise RecordLoadError(f"Invalid JSON in {source or 'record data'}: {exc}") from exc
        return parse_csv_records(text)
    return parse_json_records(payload)


def load_records(source: str, timeout_s: float = 20.0) -> Tuple[PartnershipRecord, ...]:
    text = _read_source(source, timeout_s)
    records = parse_records(text, source)
    logger.info("Loaded %d partnership records from %s", len(records), source)
    return records
