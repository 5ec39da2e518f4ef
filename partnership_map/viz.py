from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import plotly.graph_objects as go

from partnership_map.countries import boundary_names, country_counts
from partnership_map.map_state import MapViewState
from partnership_map.records import PartnershipRecord

COUNTRY_TRACE = "countries"
HIGHLIGHT_TRACE = "highlight"
MARKER_TRACE = "institutions"

INACTIVE_MARKER = {"color": "#502d0e", "size": 9}
ACTIVE_MARKER = {"color": "#e03c31", "size": 17}
TRANSPARENT_FILL = [[0, "rgba(255,255,255,0.01)"], [1, "rgba(255,255,255,0.01)"]]


@dataclass(frozen=True)
class MapClick:
    kind: str
    country: Optional[str] = None
    index: Optional[int] = None


def _country_traces(
    records: Sequence[PartnershipRecord],
    boundaries: Optional[Dict[str, Any]],
    name_property: str,
    highlighted: Optional[str],
) -> List[go.Choroplethmapbox]:
    names = boundary_names(boundaries, name_property)
    if not names:
        return []
    counts = country_counts(records)
    traces = [
        go.Choroplethmapbox(
            name=COUNTRY_TRACE,
            geojson=boundaries,
            featureidkey=f"properties.{name_property}",
            locations=names,
            z=[0] * len(names),
            customdata=[counts.get(name, 0) for name in names],
            colorscale=TRANSPARENT_FILL,
            showscale=False,
            marker={"line": {"color": "black", "width": 0.1}},
            hovertemplate="%{location}<br>Partnerships: %{customdata}<extra></extra>",
        )
    ]
    if highlighted and highlighted in names:
        traces.append(
            go.Choroplethmapbox(
                name=HIGHLIGHT_TRACE,
                geojson=boundaries,
                featureidkey=f"properties.{name_property}",
                locations=[highlighted],
                z=[0],
                customdata=[counts.get(highlighted, 0)],
                colorscale=TRANSPARENT_FILL,
                showscale=False,
                marker={"line": {"color": "blue", "width": 2}, "opacity": 0.5},
                hovertemplate="%{location}<br>Partnerships: %{customdata}<extra></extra>",
            )
        )
    return traces


def _marker_trace(records: Sequence[PartnershipRecord], state: MapViewState) -> go.Scattermapbox:
    styles = [ACTIVE_MARKER if state.is_active(idx) else INACTIVE_MARKER for idx in range(len(records))]
    return go.Scattermapbox(
        name=MARKER_TRACE,
        lat=[record.location.lat for record in records],
        lon=[record.location.lng for record in records],
        mode="markers",
        marker={
            "color": [style["color"] for style in styles],
            "size": [style["size"] for style in styles],
        },
        text=[record.institution for record in records],
        customdata=list(range(len(records))),
        hovertemplate="%{text}<extra></extra>",
    )


def _mapbox_layout(state: MapViewState, tile_url: str, style: str, token: str) -> Dict[str, Any]:
    mapbox: Dict[str, Any] = {
        "center": {"lat": state.center[0], "lon": state.center[1]},
        "zoom": state.zoom,
    }
    if tile_url:
        mapbox["style"] = "white-bg"
        mapbox["layers"] = [
            {"below": "traces", "sourcetype": "raster", "source": [tile_url]}
        ]
    elif token:
        mapbox["style"] = style
        mapbox["accesstoken"] = token
    else:
        mapbox["style"] = "open-street-map"
    return mapbox


def build_partnership_map(
    records: Sequence[PartnershipRecord],
    boundaries: Optional[Dict[str, Any]],
    state: MapViewState,
    name_property: str = "NAME_LONG",
    tile_url: str = "",
    mapbox_style: str = "open-street-map",
    mapbox_token: str = "",
    height: int = 650,
) -> go.Figure:
    fig = go.Figure()
    for trace in _country_traces(records, boundaries, name_property, state.highlighted_country):
        fig.add_trace(trace)
    fig.add_trace(_marker_trace(records, state))
    fig.update_layout(
        mapbox=_mapbox_layout(state, tile_url, mapbox_style, mapbox_token),
        margin={"r": 0, "t": 0, "l": 0, "b": 0},
        height=height,
        showlegend=False,
        # Keep user pan/zoom until the view is moved programmatically.
        uirevision=f"{state.center}-{state.zoom}",
    )
    return fig


def resolve_map_click(events: object, fig: go.Figure) -> Optional[MapClick]:
    if not events:
        return None
    event_list = events if isinstance(events, list) else [events]
    for event in event_list:
        if not isinstance(event, dict):
            continue
        curve = event.get("curveNumber")
        idx = event.get("pointIndex", event.get("pointNumber"))
        if curve is None or idx is None:
            continue
        try:
            trace = fig.data[int(curve)]
            idx = int(idx)
        except (IndexError, TypeError, ValueError):
            continue
        if trace.name in (COUNTRY_TRACE, HIGHLIGHT_TRACE):
            locations = list(trace.locations or [])
            if 0 <= idx < len(locations):
                return MapClick(kind="country", country=str(locations[idx]))
        elif trace.name == MARKER_TRACE:
            return MapClick(kind="marker", index=idx)
    return None
