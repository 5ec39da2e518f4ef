APP_TITLE = "International Partnerships Dashboard"

APP_DESCRIPTION = (
    "The International Partnerships Dashboard maps the university's agreements with "
    "institutions abroad. Staff can filter partnerships by country, agreement type and "
    "sponsoring department, click a country for its partnership count, step through "
    "institutions on the map, and browse every agreement in a paginated table."
)

DATA_SOURCES = [
    "Partnership records: a static JSON file (grouped by institution) or the geocoded CSV "
    "export with one row per agreement. Coordinates are geocoded before publishing.",
    "Country outlines: Natural Earth admin-0 boundaries, joined to records by the exact "
    "country name in the NAME_LONG property.",
    "Basemap: raster tiles from the configured tile URL (Stadia Maps by default) or a "
    "Mapbox style when an access token is configured.",
]

USAGE_NOTES = [
    "Filters in the sidebar apply to the map markers, the detail panel and the partner "
    "listing. The data table has its own column filters and can optionally follow the "
    "sidebar filters.",
    "Links of the form ?country=Chile&partners=Exchange&sponsors=College_of_Business "
    "pre-select filters when the dashboard opens. Underscores stand for spaces. The "
    "parameters are removed from the address bar once applied.",
    "Records whose country name has no matching outline still appear as markers, but a "
    "country click will not count them. Unmatched names are listed in the server log.",
    "Reset map view restores the default position without clearing filters.",
]

MERMAID_DIAGRAMS = {
    "Data flow": """
flowchart LR
  RecordFile --> RecordStore
  RecordStore --> FilterEngine
  Sidebar --> FilterEngine
  FilterEngine --> MapView
  FilterEngine --> PartnerListing
  MapView --> DetailPanel
  RecordStore --> DataTable
""",
    "Map interaction": """
flowchart LR
  CountryClick --> CountryCount
  MarkerClick --> ActiveMarker
  MarkerClick --> DetailPanel
  PrevNext --> DetailPanel
  PrevNext --> ActiveMarker
""",
}
