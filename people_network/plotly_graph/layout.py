from __future__ import annotations
import math
from typing import Dict, List, Tuple


def ring_layout(
    center_id: int,
    neighbor_ids: List[int],
    radius: float = 1.0,
    start_angle: float = math.pi / 2,
) -> Dict[int, Tuple[float, float]]:
    """
    Star layout for a network projection.
    - centre at the origin
    - neighbours evenly spaced on one ring, first neighbour at the top,
      going clockwise in list order
    """
    pos: Dict[int, Tuple[float, float]] = {center_id: (0.0, 0.0)}
    n = len(neighbor_ids)
    if n == 0:
        return pos

    step = 2.0 * math.pi / n
    for i, nid in enumerate(neighbor_ids):
        angle = start_angle - i * step
        pos[nid] = (radius * math.cos(angle), radius * math.sin(angle))
    return pos


def parallel_offsets(
    edges: List[dict],
    spacing: float = 0.08,
) -> List[float]:
    """
    Perpendicular offset for each edge so that several relationships
    between the same two people are drawn side by side instead of on top
    of each other. Offsets are centred around 0 per unordered pair.
    """
    groups: Dict[Tuple[int, int], List[int]] = {}
    for idx, e in enumerate(edges):
        key = (min(e["from"], e["to"]), max(e["from"], e["to"]))
        groups.setdefault(key, []).append(idx)

    offsets = [0.0] * len(edges)
    for members in groups.values():
        n = len(members)
        for k, idx in enumerate(members):
            offsets[idx] = (k - (n - 1) / 2.0) * spacing
    return offsets


def shift_segment(
    p0: Tuple[float, float],
    p1: Tuple[float, float],
    offset: float,
) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Move a segment sideways by ``offset`` along its left-hand normal."""
    if offset == 0.0:
        return p0, p1
    dx, dy = p1[0] - p0[0], p1[1] - p0[1]
    length = math.hypot(dx, dy) or 1.0
    nx, ny = -dy / length * offset, dx / length * offset
    return (p0[0] + nx, p0[1] + ny), (p1[0] + nx, p1[1] + ny)
