from html import escape
from typing import Dict, List

from subwaymap.compiler.compiler import CompiledMap
from subwaymap.ir.topology import NodeKind, TopologyNode
from subwaymap.visual.visual_style import NODE_STYLE, STATUS_STYLE, minimap_color, node_fill

SERVICE_RADIUS = 30

SVG_STYLE = """
  .edge-animated { stroke-dasharray: 5; animation: dashdraw 0.5s linear infinite; }
  @keyframes dashdraw { from { stroke-dashoffset: 10; } }
  .node-label { font-family: Arial, sans-serif; font-weight: bold; }
  .node-caption { font-family: Arial, sans-serif; fill: #6b7280; }
  .cluster-label { font-family: Arial, sans-serif; font-weight: 600; }
  .node-body { transition: fill 300ms, stroke 300ms; }
"""


def _attr(value) -> str:
    return escape(str(value), quote=True)


def _num(value: float) -> str:
    return f"{value:g}"


def _text_lines(x: float, y: float, text: str, css_class: str, size: int, fill: str) -> str:
    """Multi-line label centered on (x, y); lines are split on '\\n'."""
    lines = text.split("\n")
    first_dy = -(len(lines) - 1) * 0.6
    spans = []
    for i, line in enumerate(lines):
        dy = f"{first_dy:g}em" if i == 0 else "1.2em"
        spans.append(f'<tspan x="{_num(x)}" dy="{dy}">{escape(line)}</tspan>')
    return (
        f'<text x="{_num(x)}" y="{_num(y)}" class="{css_class}" font-size="{size}" '
        f'fill="{fill}" text-anchor="middle" dominant-baseline="middle">'
        f'{"".join(spans)}</text>'
    )


def _tooltip(node: TopologyNode) -> str:
    parts = [node.label.replace("\n", " ")]
    if node.description:
        parts.append(node.description)
    text = " - ".join(parts)
    if node.tracks_status:
        text += f" ({STATUS_STYLE[node.status]['label']})"
    return text


def _render_node(compiled: CompiledMap, node: TopologyNode, show_tooltips: bool) -> List[str]:
    pos = compiled.positions[node.id]
    w, h = compiled.size_of(node)
    cx, cy = pos.x + w / 2, pos.y + h / 2
    style = NODE_STYLE[node.kind]

    status = node.status.value if node.tracks_status else ""
    out = [
        f'<g class="node node-{node.kind.value}" data-node-id="{_attr(node.id)}" '
        f'data-status="{status}">'
    ]
    if show_tooltips:
        out.append(f"<title>{escape(_tooltip(node))}</title>")

    if node.kind == NodeKind.ENGINE:
        out.append(
            f'<rect class="node-body" x="{_num(pos.x)}" y="{_num(pos.y)}" '
            f'width="{_num(w)}" height="{_num(h)}" rx="12" ry="12" '
            f'fill="{style["fill"]}" stroke="{style["stroke"]}" stroke-width="{style["stroke_width"]}"/>'
        )
        out.append(_text_lines(cx, cy - 10, node.label, "node-label", 24, "#111827"))
        out.append(_text_lines(cx, pos.y + h - 24, style["caption"], "node-caption", 14, "#6b7280"))
    elif node.kind == NodeKind.ROUTER:
        out.append(
            f'<rect class="node-body" x="{_num(pos.x)}" y="{_num(pos.y)}" '
            f'width="{_num(w)}" height="{_num(h)}" rx="{_num(h / 2)}" ry="{_num(h / 2)}" '
            f'fill="{style["fill"]}" stroke="{style["stroke"]}" stroke-width="{style["stroke_width"]}"/>'
        )
        out.append(_text_lines(cx, cy - 8, node.label, "node-label", 18, "#111827"))
        out.append(_text_lines(cx, cy + 14, style["caption"], "node-caption", 12, "#6b7280"))
    else:
        color = node_fill(node)
        out.append(
            f'<circle class="node-body" cx="{_num(cx)}" cy="{_num(cy)}" r="{SERVICE_RADIUS}" '
            f'fill="{color}" stroke="{color}" stroke-width="{style["stroke_width"]}"/>'
        )
        out.append(_text_lines(cx, cy, node.label, "node-label", 20 if "\n" not in node.label else 12, "#ffffff"))

    out.append("</g>")
    return out


def _handle(compiled: CompiledMap, index: Dict[str, TopologyNode], node_id: str, side: str):
    node = index[node_id]
    pos = compiled.positions[node_id]
    w, h = compiled.size_of(node)
    cy = pos.y + h / 2
    if node.tracks_status:
        # circles are drawn centered in their box
        cx = pos.x + w / 2
        return (cx + SERVICE_RADIUS if side == "right" else cx - SERVICE_RADIUS), cy
    return (pos.x + w if side == "right" else pos.x), cy


def smooth_step_path(x1: float, y1: float, x2: float, y2: float) -> str:
    """Orthogonal connector: horizontal, vertical at the midpoint, horizontal."""
    mid_x = (x1 + x2) / 2
    return (
        f"M {_num(x1)} {_num(y1)} L {_num(mid_x)} {_num(y1)} "
        f"L {_num(mid_x)} {_num(y2)} L {_num(x2)} {_num(y2)}"
    )


def render_svg(compiled: CompiledMap, show_tooltips: bool = True) -> str:
    ext = compiled.extent

    svg = [
        f'<svg class="subway-map" viewBox="{_num(ext.x)} {_num(ext.y)} {_num(ext.width)} {_num(ext.height)}" '
        f'width="{_num(ext.width)}" height="{_num(ext.height)}" xmlns="http://www.w3.org/2000/svg">',
        f"<style>{SVG_STYLE}</style>",
    ]

    # Cluster outlines sit behind everything
    for box in compiled.clusters:
        if not box.width or not box.height:
            continue
        svg.append(f'<g class="cluster" data-cluster="{_attr(box.name)}">')
        if show_tooltips and box.description:
            svg.append(f"<title>{escape(box.description)}</title>")
        svg.append(
            f'<rect x="{_num(box.x)}" y="{_num(box.y)}" width="{_num(box.width)}" height="{_num(box.height)}" '
            f'rx="8" fill="{box.color}" fill-opacity="0.03" stroke="{box.color}" '
            f'stroke-width="2" stroke-dasharray="8,4"/>'
        )
        svg.append(
            f'<text x="{_num(box.x + 10)}" y="{_num(box.y + 20)}" class="cluster-label" '
            f'font-size="14" fill="{box.color}">{escape(box.name)}</text>'
        )
        svg.append("</g>")

    # Draw edges before nodes
    index = compiled.topology.node_index()
    for edge in compiled.edges:
        x1, y1 = _handle(compiled, index, edge.source, "right")
        x2, y2 = _handle(compiled, index, edge.target, "left")
        css = "edge edge-animated" if edge.animated else "edge"
        svg.append(
            f'<path class="{css}" data-edge-id="{_attr(edge.id)}" d="{smooth_step_path(x1, y1, x2, y2)}" '
            f'fill="none" stroke="{edge.color}" stroke-width="{_num(edge.stroke_width)}"/>'
        )

    for node in compiled.topology.nodes:
        if node.id in compiled.positions:
            svg.extend(_render_node(compiled, node, show_tooltips))

    svg.append("</svg>")
    return "\n".join(svg)


def render_minimap(compiled: CompiledMap, width: int = 240) -> str:
    """Scaled overview: one rect per node, engines and routers in black."""
    ext = compiled.extent
    if not ext.width or not ext.height:
        return f'<svg class="minimap" width="{width}" height="0" xmlns="http://www.w3.org/2000/svg"></svg>'

    height = ext.height * width / ext.width
    svg = [
        f'<svg class="minimap" viewBox="{_num(ext.x)} {_num(ext.y)} {_num(ext.width)} {_num(ext.height)}" '
        f'width="{width}" height="{_num(round(height, 2))}" xmlns="http://www.w3.org/2000/svg">',
        f'<rect x="{_num(ext.x)}" y="{_num(ext.y)}" width="{_num(ext.width)}" height="{_num(ext.height)}" '
        f'fill="#f9fafb"/>',
    ]
    for node in compiled.topology.nodes:
        pos = compiled.positions.get(node.id)
        if pos is None:
            continue
        w, h = compiled.size_of(node)
        svg.append(
            f'<rect data-minimap-id="{_attr(node.id)}" x="{_num(pos.x)}" y="{_num(pos.y)}" '
            f'width="{_num(w)}" height="{_num(h)}" rx="4" fill="{minimap_color(node)}"/>'
        )
    svg.append("</svg>")
    return "\n".join(svg)
