from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from partnership_map.records import GeoPoint


@dataclass
class MapViewState:
    """Per-session map state: view window, highlighted shape and active marker."""

    default_center: Tuple[float, float]
    default_zoom: float
    center: Tuple[float, float] = field(init=False)
    zoom: float = field(init=False)
    highlighted_country: Optional[str] = None
    selected_country: Optional[str] = None
    active_marker: Optional[int] = None

    def __post_init__(self) -> None:
        self.center = self.default_center
        self.zoom = self.default_zoom

    def hover(self, country: str) -> None:
        self.highlighted_country = country

    def unhover(self) -> None:
        self.highlighted_country = None

    def click_country(self, country: str) -> None:
        self.selected_country = country
        self.highlighted_country = country

    def activate_marker(self, index: int) -> None:
        # A single index means every other marker is inactive.
        self.active_marker = index

    def deactivate_markers(self) -> None:
        self.active_marker = None

    def is_active(self, index: int) -> bool:
        return self.active_marker == index

    def focus(self, point: GeoPoint, zoom: float) -> None:
        self.center = (point.lat, point.lng)
        self.zoom = zoom

    def reset_view(self) -> None:
        self.center = self.default_center
        self.zoom = self.default_zoom
