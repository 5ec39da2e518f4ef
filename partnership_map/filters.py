from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from partnership_map.records import PartnershipEntry, PartnershipRecord

ALL_TYPES = "all"

# Older category labels were cut at 23 characters upstream; a selection equal to
# the truncated label still matches the full type.
TYPE_LABEL_PREFIX_LEN = 23


@dataclass(frozen=True)
class FilterSelection:
    country: str = ""
    partnership_type: str = ALL_TYPES
    sponsor: str = ""

    @property
    def is_default(self) -> bool:
        return self == FilterSelection()


@dataclass(frozen=True)
class RecordMatch:
    record: PartnershipRecord
    entries: Tuple[PartnershipEntry, ...]


@dataclass(frozen=True)
class FilterResult:
    matches: Tuple[RecordMatch, ...]
    total: int

    @property
    def records(self) -> Tuple[PartnershipRecord, ...]:
        return tuple(match.record for match in self.matches)

    @property
    def matched(self) -> int:
        return len(self.matches)

    @property
    def summary(self) -> str:
        return f"Showing {self.matched} of {self.total} entries"


def type_matches(entry: PartnershipEntry, partnership_type: str) -> bool:
    if partnership_type == ALL_TYPES:
        return True
    if partnership_type in entry.type:
        return True
    return partnership_type == entry.type[:TYPE_LABEL_PREFIX_LEN]


def sponsor_matches(entry: PartnershipEntry, sponsor: str) -> bool:
    if not sponsor:
        return True
    return sponsor in entry.in_unit


def _matching_entries(
    record: PartnershipRecord, selection: FilterSelection
) -> Tuple[PartnershipEntry, ...] | None:
    by_type = [e for e in record.partnerships if type_matches(e, selection.partnership_type)]
    by_sponsor = [e for e in record.partnerships if sponsor_matches(e, selection.sponsor)]
    if selection.partnership_type != ALL_TYPES and not by_type:
        return None
    if selection.sponsor and not by_sponsor:
        return None
    both = tuple(e for e in record.partnerships if e in by_type and e in by_sponsor)
    if both or not record.partnerships:
        return both
    # Type and sponsor were satisfied by different agreements of the same institution.
    return tuple(e for e in record.partnerships if e in by_type or e in by_sponsor)


def match_record(record: PartnershipRecord, selection: FilterSelection) -> RecordMatch | None:
    if selection.country and record.country != selection.country:
        return None
    entries = _matching_entries(record, selection)
    if entries is None:
        return None
    return RecordMatch(record=record, entries=entries)


def filter_records(
    records: Sequence[PartnershipRecord], selection: FilterSelection
) -> FilterResult:
    matches = []
    for record in records:
        match = match_record(record, selection)
        if match is not None:
            matches.append(match)
    return FilterResult(matches=tuple(matches), total=len(records))


def _distinct(values: Iterable[str]) -> List[str]:
    return sorted({value for value in values if value})


def country_options(records: Sequence[PartnershipRecord]) -> List[str]:
    return _distinct(record.country for record in records)


def partnership_type_options(records: Sequence[PartnershipRecord]) -> List[str]:
    types = _distinct(entry.type for record in records for entry in record.partnerships)
    return [ALL_TYPES] + types


def sponsor_options(records: Sequence[PartnershipRecord]) -> List[str]:
    return _distinct(
        sponsor for record in records for entry in record.partnerships for sponsor in entry.sponsors
    )
