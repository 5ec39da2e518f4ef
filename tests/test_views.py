"""
Tests for the Streamlit glue that keeps the map, the detail panel and the
filters in step: map click handling, Previous/Next, deep-link seeding and the
reset on filter change.

Each view module's ``st`` is replaced with a stand-in carrying a plain dict as
``session_state``, so the functions run without a Streamlit server.

Run: pytest tests/test_views.py -v
"""

from types import SimpleNamespace

import pytest

from partnership_map.countries import count_records_in_country
from partnership_map.filters import (
    ALL_TYPES,
    FilterSelection,
    country_options,
    partnership_type_options,
    sponsor_options,
)
from partnership_map.map_state import MapViewState
from partnership_map.navigation import NONE_SELECTED, DetailNavigator
from partnership_map.records import GeoPoint, PartnershipEntry, PartnershipRecord
from partnership_map.viz import build_partnership_map
from views import detail_panel, map_view, session

# ── Fixtures ─────────────────────────────────────────────────────────────────


def _make_record(institution: str, country: str, lat: float, lng: float, *types: str) -> PartnershipRecord:
    return PartnershipRecord(
        institution=institution,
        country=country,
        location=GeoPoint(lat=lat, lng=lng),
        partnerships=tuple(
            PartnershipEntry(type=t, description="Agreement", in_unit="College of Business")
            for t in types
        ),
    )


RECORDS = [
    _make_record("Politecnico di Milano", "Italy", 45.47, 9.22, "Customized Study Abroad Program"),
    _make_record("Sapienza", "Italy", 41.90, 12.51, "Student Exchange"),
    _make_record("Universidad de Chile", "Chile", -33.44, -70.65, "Research Collaboration"),
]

BOUNDARIES = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {"NAME_LONG": name},
            "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
        }
        for name in ("Italy", "Chile")
    ],
}

# Trace order with boundaries and no highlight: countries, institutions.
COUNTRY_CURVE = 0
MARKER_CURVE = 1


class _FakeQueryParams:
    def __init__(self, params):
        self.params = dict(params)
        self.cleared = 0

    def to_dict(self):
        return dict(self.params)

    def clear(self):
        self.params = {}
        self.cleared += 1


def _make_st(monkeypatch, module, params=None):
    fake = SimpleNamespace(session_state={}, query_params=_FakeQueryParams(params or {}))
    monkeypatch.setattr(module, "st", fake)
    return fake


@pytest.fixture
def map_state():
    return MapViewState(default_center=(30.0, -30.0), default_zoom=2.0)


@pytest.fixture
def navigator():
    return DetailNavigator(len(RECORDS))


def _options():
    return {
        "filter_country": [""] + country_options(RECORDS),
        "filter_partners": partnership_type_options(RECORDS),
        "filter_sponsors": [""] + sponsor_options(RECORDS),
    }


# ── Map clicks ───────────────────────────────────────────────────────────────


class TestApplyClick:
    def _click(self, map_state, navigator, curve, index):
        fig = build_partnership_map(RECORDS, BOUNDARIES, map_state)
        event = [{"curveNumber": curve, "pointIndex": index}]
        return map_view._apply_click(event, fig, RECORDS, map_state, navigator)

    def test_marker_click_selects_record(self, monkeypatch, map_state, navigator):
        _make_st(monkeypatch, map_view)
        assert self._click(map_state, navigator, MARKER_CURVE, 2) is True
        assert navigator.index == 2
        assert map_state.is_active(2)

    def test_same_marker_after_next_is_applied(self, monkeypatch, map_state, navigator):
        _make_st(monkeypatch, map_view)
        self._click(map_state, navigator, MARKER_CURVE, 0)
        navigator.next()
        map_state.activate_marker(navigator.index)

        assert self._click(map_state, navigator, MARKER_CURVE, 0) is True
        assert navigator.index == 0
        assert map_state.is_active(0)

    def test_same_index_after_filter_change_is_applied(self, monkeypatch, map_state, navigator):
        fake = _make_st(monkeypatch, map_view)
        self._click(map_state, navigator, MARKER_CURVE, 1)
        fake.session_state["navigator"] = navigator
        fake.session_state["map_state"] = map_state
        monkeypatch.setattr(session, "st", fake)
        session.sync_displayed(FilterSelection(country="Italy"), RECORDS[:2])

        assert self._click(map_state, navigator, MARKER_CURVE, 1) is True
        assert navigator.index == 1

    def test_each_click_moves_component_key(self, monkeypatch, map_state, navigator):
        fake = _make_st(monkeypatch, map_view)
        self._click(map_state, navigator, MARKER_CURVE, 0)
        self._click(map_state, navigator, MARKER_CURVE, 0)
        assert fake.session_state["map_event_key"] == 2

    def test_country_click(self, monkeypatch, map_state, navigator):
        _make_st(monkeypatch, map_view)
        assert self._click(map_state, navigator, COUNTRY_CURVE, 0) is True
        assert map_state.selected_country == "Italy"
        assert map_state.highlighted_country == "Italy"
        assert count_records_in_country(RECORDS, map_state.selected_country) == 2
        assert navigator.index == NONE_SELECTED

    def test_no_event(self, monkeypatch, map_state, navigator):
        fake = _make_st(monkeypatch, map_view)
        fig = build_partnership_map(RECORDS, BOUNDARIES, map_state)
        assert map_view._apply_click([], fig, RECORDS, map_state, navigator) is False
        assert "map_event_key" not in fake.session_state


# ── Previous / Next ──────────────────────────────────────────────────────────


class TestStep:
    SETTINGS = SimpleNamespace(focus_zoom=5.0)

    def _session(self, monkeypatch, map_state, navigator):
        fake = _make_st(monkeypatch, detail_panel)
        fake.session_state["map_state"] = map_state
        fake.session_state["navigator"] = navigator
        return fake

    def test_next_activates_and_focuses(self, monkeypatch, map_state, navigator):
        self._session(monkeypatch, map_state, navigator)
        navigator.select(0)
        detail_panel._step(RECORDS, self.SETTINGS, True)
        assert navigator.index == 1
        assert map_state.is_active(1)
        assert map_state.center == (41.90, 12.51)
        assert map_state.zoom == 5.0

    def test_previous_wraps_to_last(self, monkeypatch, map_state, navigator):
        self._session(monkeypatch, map_state, navigator)
        navigator.select(0)
        detail_panel._step(RECORDS, self.SETTINGS, False)
        assert navigator.index == 2
        assert map_state.is_active(2)
        assert map_state.center == (-33.44, -70.65)

    def test_empty_list_is_noop(self, monkeypatch, map_state):
        nav = DetailNavigator(0)
        self._session(monkeypatch, map_state, nav)
        detail_panel._step((), self.SETTINGS, True)
        assert nav.index == NONE_SELECTED
        assert map_state.active_marker is None
        assert map_state.center == (30.0, -30.0)


# ── Deep links ───────────────────────────────────────────────────────────────


class TestSeedFromQueryParams:
    def test_applies_once_then_clears(self, monkeypatch):
        fake = _make_st(monkeypatch, session, {"country": "Chile"})
        session.seed_from_query_params(_options())
        assert fake.session_state["filter_country"] == "Chile"
        assert fake.session_state["filter_partners"] == ALL_TYPES
        assert fake.query_params.cleared == 1

        fake.session_state["filter_country"] = "Italy"
        fake.query_params.params = {"country": "Chile"}
        session.seed_from_query_params(_options())
        assert fake.session_state["filter_country"] == "Italy"
        assert fake.query_params.cleared == 1

    def test_no_params_leaves_widgets_alone(self, monkeypatch):
        fake = _make_st(monkeypatch, session)
        session.seed_from_query_params(_options())
        assert "filter_country" not in fake.session_state
        assert fake.query_params.cleared == 0

    def test_truncated_type_selects_full_option(self, monkeypatch):
        fake = _make_st(monkeypatch, session, {"partners": "Customized_Study_Abroad"})
        session.seed_from_query_params(_options())
        assert fake.session_state["filter_partners"] == "Customized Study Abroad Program"

    def test_sponsor_substring_selects_option(self, monkeypatch):
        fake = _make_st(monkeypatch, session, {"sponsors": "Business"})
        session.seed_from_query_params(_options())
        assert fake.session_state["filter_sponsors"] == "College of Business"

    def test_unknown_country_falls_back(self, monkeypatch, caplog):
        fake = _make_st(monkeypatch, session, {"country": "Atlantis", "partners": "Student_Exchange"})
        session.seed_from_query_params(_options())
        assert fake.session_state["filter_country"] == ""
        assert fake.session_state["filter_partners"] == "Student Exchange"
        assert "Ignoring deep-link country" in caplog.text


# ── Filter changes ───────────────────────────────────────────────────────────


class TestSyncDisplayed:
    def test_new_selection_resets_navigation(self, monkeypatch, map_state, navigator):
        fake = _make_st(monkeypatch, session)
        fake.session_state["map_state"] = map_state
        fake.session_state["navigator"] = navigator
        navigator.select(2)
        map_state.activate_marker(2)

        assert session.sync_displayed(FilterSelection(country="Italy"), RECORDS[:2]) is True
        assert navigator.index == NONE_SELECTED
        assert navigator.size == 2
        assert map_state.active_marker is None

    def test_same_selection_keeps_navigation(self, monkeypatch, map_state, navigator):
        fake = _make_st(monkeypatch, session)
        fake.session_state["map_state"] = map_state
        fake.session_state["navigator"] = navigator
        session.sync_displayed(FilterSelection(), RECORDS)
        navigator.select(1)

        assert session.sync_displayed(FilterSelection(), RECORDS) is False
        assert navigator.index == 1

    def test_same_count_still_resets(self, monkeypatch, map_state):
        fake = _make_st(monkeypatch, session)
        nav = DetailNavigator(1)
        fake.session_state["map_state"] = map_state
        fake.session_state["navigator"] = nav
        session.sync_displayed(FilterSelection(country="Chile"), RECORDS[2:])
        nav.select(0)

        session.sync_displayed(FilterSelection(partnership_type="Research"), RECORDS[2:])
        assert nav.index == NONE_SELECTED
