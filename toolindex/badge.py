"""Status badge — a shields-style SVG for an origin's verification status.

Consumes only the status value, never scores.
"""

from __future__ import annotations

from types import MappingProxyType

BADGE_LABEL = "webmcp"

STATUS_COLORS = MappingProxyType(
    {
        "verified": MappingProxyType({"bg": "#22c55e", "text": "#fff"}),
        "invalid": MappingProxyType({"bg": "#ef4444", "text": "#fff"}),
        "stale": MappingProxyType({"bg": "#eab308", "text": "#fff"}),
        "unknown": MappingProxyType({"bg": "#6b7280", "text": "#fff"}),
    }
)

_CHAR_WIDTH = 7
_PADDING = 12


def render_badge(status) -> str:
    """Render an SVG badge. Unrecognized statuses use the ``unknown`` colours."""
    value = str(getattr(status, "value", status) or "unknown")
    colors = STATUS_COLORS.get(value, STATUS_COLORS["unknown"])
    if value not in STATUS_COLORS:
        value = "unknown"

    label_width = len(BADGE_LABEL) * _CHAR_WIDTH + _PADDING
    value_width = len(value) * _CHAR_WIDTH + _PADDING
    total_width = label_width + value_width
    label_x = label_width / 2
    value_x = label_width + value_width / 2

    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{total_width}" height="20">
  <linearGradient id="b" x2="0" y2="100%">
    <stop offset="0" stop-color="#bbb" stop-opacity=".1"/>
    <stop offset="1" stop-opacity=".1"/>
  </linearGradient>
  <clipPath id="a">
    <rect width="{total_width}" height="20" rx="3" fill="#fff"/>
  </clipPath>
  <g clip-path="url(#a)">
    <rect width="{label_width}" height="20" fill="#555"/>
    <rect x="{label_width}" width="{value_width}" height="20" fill="{colors['bg']}"/>
    <rect width="{total_width}" height="20" fill="url(#b)"/>
  </g>
  <g fill="{colors['text']}" text-anchor="middle" font-family="DejaVu Sans,Verdana,Geneva,sans-serif" font-size="11">
    <text x="{label_x:g}" y="15" fill="#010101" fill-opacity=".3">{BADGE_LABEL}</text>
    <text x="{label_x:g}" y="14" fill="#fff">{BADGE_LABEL}</text>
    <text x="{value_x:g}" y="15" fill="#010101" fill-opacity=".3">{value}</text>
    <text x="{value_x:g}" y="14" fill="{colors['text']}">{value}</text>
  </g>
</svg>"""
