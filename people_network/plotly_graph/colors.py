from __future__ import annotations
from typing import List

GROUP_COLORS = {
    "family": "#ff9999",
    "friend": "#99ccff",
    "colleague": "#99ff99",
    "work": "#99ff99",
    "other": "#cccccc",
}
FALLBACK_PALETTE = [
    "#FFA07A", "#DDA0DD", "#F4A460", "#66CDAA", "#E6E6FA", "#20B2AA",
]
UNKNOWN_COLOR = "#cccccc"


def group_color(group: str | None) -> str:
    """Colour for a group tag. Free-text tags not in the table get a stable
    palette colour derived from the tag itself."""
    if not group:
        return UNKNOWN_COLOR
    key = group.strip().lower()
    if key in GROUP_COLORS:
        return GROUP_COLORS[key]
    return FALLBACK_PALETTE[sum(key.encode("utf-8")) % len(FALLBACK_PALETTE)]


def build_node_colors(groups: List[str | None]) -> List[str]:
    return [group_color(g) for g in groups]
