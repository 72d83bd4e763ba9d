from __future__ import annotations

from typing import Dict, List, Tuple
from plotly import graph_objects as go

from ..errors import ValidationFailed
from .colors import build_node_colors
from .layout import parallel_offsets, ring_layout, shift_segment

EXPORT_FORMATS: Dict[str, str] = {
    "html": "text/html",
    "json": "application/json",
    "png": "image/png",
    "pdf": "application/pdf",
}


def build_network_figure(network: dict, radius: float = 1.0) -> go.Figure:
    """
    Plotly figure for a ``{nodes, edges}`` projection as built by
    ``graph.build_network``. The first node is the centre.
    """
    nodes: List[dict] = network.get("nodes", [])
    edges: List[dict] = network.get("edges", [])

    if not nodes:
        fig = go.Figure()
        fig.update_layout(title="No people found")
        return fig

    center_id = nodes[0]["id"]
    pos = ring_layout(center_id, [n["id"] for n in nodes[1:]], radius=radius)

    # One straight segment per edge; parallel edges get side offsets.
    offsets = parallel_offsets(edges)
    edge_x: list = []
    edge_y: list = []
    label_x: list[float] = []
    label_y: list[float] = []
    label_text: list[str] = []
    arrows: list[Tuple[Tuple[float, float], Tuple[float, float]]] = []

    for e, off in zip(edges, offsets):
        if e["from"] not in pos or e["to"] not in pos:
            continue
        lo, hi = sorted((e["from"], e["to"]))
        a, b = shift_segment(pos[lo], pos[hi], off)
        start, end = (a, b) if e["from"] == lo else (b, a)

        edge_x += [start[0], end[0], None]
        edge_y += [start[1], end[1], None]
        label_x.append((start[0] + end[0]) / 2.0)
        label_y.append((start[1] + end[1]) / 2.0)
        label_text.append(e["label"])
        arrows.append((start, end))

    edge_trace = go.Scatter(
        x=edge_x,
        y=edge_y,
        mode="lines",
        line=dict(width=1.5, color="#999"),
        hoverinfo="none",
        showlegend=False,
    )
    label_trace = go.Scatter(
        x=label_x,
        y=label_y,
        mode="text",
        text=label_text,
        textposition="top center",
        textfont=dict(size=11, color="#555"),
        hoverinfo="text",
        hovertext=label_text,
        showlegend=False,
    )

    node_ids = [n["id"] for n in nodes]
    node_trace = go.Scatter(
        x=[pos[i][0] for i in node_ids],
        y=[pos[i][1] for i in node_ids],
        mode="markers+text",
        text=[n["label"] for n in nodes],
        textposition="bottom center",
        hovertext=[f"{n['label']}<br>ID: {n['id']}<br>Group: {n['group']}" for n in nodes],
        hoverinfo="text",
        marker=dict(
            size=[26] + [18] * (len(nodes) - 1),
            color=build_node_colors([n.get("group") for n in nodes]),
            line=dict(width=1, color="#333"),
        ),
        customdata=node_ids,
        showlegend=False,
    )

    fig = go.Figure(data=[edge_trace, label_trace, node_trace])
    for start, end in arrows:
        fig.add_annotation(
            x=end[0], y=end[1], ax=start[0], ay=start[1],
            xref="x", yref="y", axref="x", ayref="y",
            showarrow=True, arrowhead=2, arrowsize=1.2, arrowwidth=1.2,
            arrowcolor="#999", standoff=12, text="",
        )

    pad = radius * 0.35
    fig.update_layout(
        hovermode="closest",
        dragmode="pan",
        margin=dict(l=20, r=20, t=20, b=20),
        plot_bgcolor="white",
        paper_bgcolor="white",
        xaxis=dict(
            showgrid=False,
            zeroline=False,
            showticklabels=False,
            range=[-radius - pad, radius + pad],
            scaleanchor="y",
            scaleratio=1,
        ),
        yaxis=dict(
            showgrid=False,
            zeroline=False,
            showticklabels=False,
            range=[-radius - pad, radius + pad],
        ),
    )
    return fig


def export_figure(fig: go.Figure, fmt: str, width: int = 1200, height: int = 900) -> Tuple[bytes, str]:
    """Serialize ``fig`` as html/json/png/pdf. Returns ``(payload, media_type)``.

    png and pdf go through plotly's static image export, which needs kaleido.
    """
    fmt = (fmt or "").lower()
    if fmt not in EXPORT_FORMATS:
        raise ValidationFailed.single(
            f"Unsupported export format {fmt!r}; choose one of {sorted(EXPORT_FORMATS)}",
            loc=("query", "format"),
        )
    if fmt == "html":
        config = {"scrollZoom": True, "displayModeBar": True, "responsive": True}
        payload = fig.to_html(include_plotlyjs="cdn", full_html=True, config=config).encode("utf-8")
    elif fmt == "json":
        payload = fig.to_json().encode("utf-8")
    else:
        payload = fig.to_image(format=fmt, width=width, height=height)
    return payload, EXPORT_FORMATS[fmt]
