from __future__ import annotations

from typing import Callable, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote, unquote_plus

from partnership_map.filters import ALL_TYPES, FilterSelection, sponsor_matches, type_matches
from partnership_map.records import PartnershipEntry

DEEPLINK_PARAMS = ("country", "partners", "sponsors")


def decode_param(value: str) -> str:
    # Links from other pages encode spaces as underscores.
    return unquote_plus(value).replace("_", " ").strip()


def _first(value) -> str:
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else ""
    return str(value)


def parse_deeplink(params: Mapping[str, object]) -> Optional[FilterSelection]:
    present = {name: decode_param(_first(params[name])) for name in DEEPLINK_PARAMS if name in params}
    if not present:
        return None
    return FilterSelection(
        country=present.get("country", ""),
        partnership_type=present.get("partners") or ALL_TYPES,
        sponsor=present.get("sponsors", ""),
    )


def build_deeplink(selection: FilterSelection) -> str:
    """Query string that reproduces ``selection`` when opened on the dashboard."""
    parts = []
    if selection.country:
        parts.append(f"country={_encode(selection.country)}")
    if selection.partnership_type != ALL_TYPES:
        parts.append(f"partners={_encode(selection.partnership_type)}")
    if selection.sponsor:
        parts.append(f"sponsors={_encode(selection.sponsor)}")
    return "?" + "&".join(parts) if parts else ""


def _encode(value: str) -> str:
    return quote(value.replace(" ", "_"), safe="_")


def _type_option_matches(option: str, value: str) -> bool:
    return option != ALL_TYPES and type_matches(PartnershipEntry(type=option, description=""), value)


def _sponsor_option_matches(option: str, value: str) -> bool:
    return bool(option) and sponsor_matches(
        PartnershipEntry(type="", description="", in_unit=option), value
    )


def resolve_option(
    value: str,
    options: Sequence[str],
    matches: Optional[Callable[[str, str], bool]] = None,
) -> Optional[str]:
    """The dropdown option a linked value selects, or None when nothing fits.

    An exact option wins; otherwise the first option accepted by ``matches``.
    """
    if value in options:
        return value
    if matches is not None:
        for option in options:
            if matches(option, value):
                return option
    return None


def resolve_deeplink(
    selection: FilterSelection,
    countries: Sequence[str],
    partnership_types: Sequence[str],
    sponsors: Sequence[str],
) -> Tuple[FilterSelection, List[str]]:
    """Map a parsed link onto the available options.

    Returns the selection to apply and the names of parameters whose value
    matched no option; those fall back to their defaults.
    """
    ignored = []
    country = ""
    if selection.country:
        country = resolve_option(selection.country, countries) or ""
        if not country:
            ignored.append("country")
    partnership_type = ALL_TYPES
    if selection.partnership_type != ALL_TYPES:
        partnership_type = (
            resolve_option(selection.partnership_type, partnership_types, _type_option_matches)
            or ALL_TYPES
        )
        if partnership_type == ALL_TYPES:
            ignored.append("partners")
    sponsor = ""
    if selection.sponsor:
        sponsor = resolve_option(selection.sponsor, sponsors, _sponsor_option_matches) or ""
        if not sponsor:
            ignored.append("sponsors")
    resolved = FilterSelection(country=country, partnership_type=partnership_type, sponsor=sponsor)
    return resolved, ignored
