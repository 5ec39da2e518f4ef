from __future__ import annotations

import html
from typing import Any, List

from partnership_map.filters import FilterResult
from partnership_map.records import PartnershipEntry, PartnershipRecord

CUSTOMIZED_STUDY_ABROAD = "Customized Study Abroad"
NO_RESULTS_ROW = '<tr><td colspan="3">No results found.</td></tr>'


def _esc(value: Any) -> str:
    if value is None:
        return ""
    return html.escape(str(value))


def _link(url: str, content: str) -> str:
    return f'<a href="{_esc(url)}" target="_blank" rel="noopener">{content}</a>'


def entry_text(entry: PartnershipEntry) -> str:
    if entry.type == CUSTOMIZED_STUDY_ABROAD:
        return f"{entry.description} Program: {entry.program}"
    return entry.description


def render_entry_html(entry: PartnershipEntry) -> str:
    content = _esc(entry_text(entry))
    if entry.has_link:
        content = _link(entry.url, content)
    return f"<li>{content}</li>"


def render_detail_html(record: PartnershipRecord) -> str:
    items = "".join(render_entry_html(entry) for entry in record.partnerships)
    return (
        '<div class="partnership-detail">'
        f'<h2 class="institution">{_esc(record.institution)}</h2>'
        f'<p class="location">{_esc(record.place_label)}</p>'
        '<h3 class="sidebar-margin">Partnership</h3>'
        f"<ul>{items}</ul>"
        "</div>"
    )


def _departments_html(entry: PartnershipEntry) -> str:
    if entry.has_link:
        return "<ul>" + "".join(f"<li>{_esc(s)}</li>" for s in entry.sponsors) + "</ul>"
    return _esc(" - ".join(entry.sponsors))


def _listing_entry_html(entry: PartnershipEntry) -> str:
    return (
        f"<li><b>Type:</b><br>{_esc(entry.type)}<br>"
        f"<b>Departments:</b><br>{_departments_html(entry)}</li>"
    )


def _listing_row_html(record: PartnershipRecord, entries, stripe: bool) -> str:
    link_url = next((entry.url for entry in entries if entry.has_link), "")
    name = _esc(record.institution)
    if link_url:
        name = _link(link_url, name)
    row_class = ' class="stripe"' if stripe else ""
    items = "".join(_listing_entry_html(entry) for entry in entries)
    return (
        f"<tr{row_class}>"
        f"<td>{_esc(record.country)}</td>"
        f"<td>{name}</td>"
        f"<td><ul>{items}</ul></td>"
        "</tr>"
    )


def render_listing_rows(result: FilterResult) -> List[str]:
    if not result.matches:
        return [NO_RESULTS_ROW]
    return [
        _listing_row_html(match.record, match.entries, stripe=idx % 2 == 0)
        for idx, match in enumerate(result.matches)
    ]


def render_listing_html(result: FilterResult) -> str:
    body = "".join(render_listing_rows(result))
    return (
        '<table id="intl_partners" class="partnership-listing">'
        "<thead><tr><th>Country</th><th>Institution</th><th>Partnerships</th></tr></thead>"
        f"<tbody>{body}</tbody>"
        "</table>"
    )


def render_summary_html(result: FilterResult) -> str:
    return f'<p id="partnership-info">{_esc(result.summary)}</p>'


LISTING_CSS = """
<style>
table.partnership-listing { width: 100%; border-collapse: collapse; }
table.partnership-listing th, table.partnership-listing td {
  border-bottom: 1px solid #dfe2e5; padding: 8px 12px; vertical-align: top; text-align: left;
}
table.partnership-listing tr.stripe { background-color: #f6f8fa; }
.partnership-detail h2 { font-size: 1.3rem; margin-bottom: 0.2rem; }
.partnership-detail .location { color: #555; }
</style>
"""
