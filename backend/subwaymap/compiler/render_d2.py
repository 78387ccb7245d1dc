# backend/subwaymap/compiler/render_d2.py
"""
D2 Diagram Renderer

Exports a compiled subway map as D2 source so it can be re-laid out with
any D2 engine (dagre, elk, tala).

Docs: https://d2lang.com/
"""

import re
from typing import Dict, List

from subwaymap.compiler.compiler import CompiledMap
from subwaymap.ir.topology import NodeKind, TopologyEdge, TopologyNode
from subwaymap.visual.visual_style import NODE_STYLE, node_fill


D2_SHAPE_MAP = {
    NodeKind.ENGINE: "rectangle",
    NodeKind.ROUTER: "oval",
    NodeKind.SERVICE: "circle",
    NodeKind.DATABASE: "cylinder",
    NodeKind.QUEUE: "queue",
}

D2_DIRECTION = {
    "LR": "right",
    "RL": "left",
    "TB": "down",
    "BT": "up",
}


def render_d2(compiled: CompiledMap) -> str:
    """
    Render a compiled map to D2 format.

    Clustered nodes are emitted inside a container named after the cluster;
    edges then address them by their container path.
    """
    topology = compiled.topology
    rankdir = topology.layout.rankdir if topology.layout else "LR"

    lines = [f"# {topology.title}", f"direction: {D2_DIRECTION.get(rankdir, 'right')}", ""]

    # First cluster wins when a node is listed twice
    container_of: Dict[str, str] = {}
    members: Dict[str, List[TopologyNode]] = {}
    index = topology.node_index()
    for cluster in topology.clusters:
        cid = _sanitize_id(cluster.name)
        for member in cluster.member_ids:
            if member in index and member not in container_of:
                container_of[member] = cid
                members.setdefault(cluster.name, []).append(index[member])

    for cluster in topology.clusters:
        nodes = members.get(cluster.name)
        if not nodes:
            continue
        lines.append(f'{_sanitize_id(cluster.name)}: "{_escape(cluster.name)}" {{')
        lines.append(f"  style: {{ stroke: '{cluster.color}'; stroke-dash: 4 }}")
        for node in nodes:
            lines.append(f"  {_render_node(node)}")
        lines.append("}")
        lines.append("")

    for node in topology.nodes:
        if node.id not in container_of:
            lines.append(_render_node(node))

    lines.append("")

    for edge in compiled.edges:
        lines.append(_render_edge(edge, container_of))

    return "\n".join(lines)


def _sanitize_id(id_str: str) -> str:
    """Make ID safe for D2"""
    return re.sub(r"[^A-Za-z0-9_]", "_", id_str)


def _escape(label: str) -> str:
    return label.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _path(node_id: str, container_of: Dict[str, str]) -> str:
    node_ref = _sanitize_id(node_id)
    if node_id in container_of:
        return f"{container_of[node_id]}.{node_ref}"
    return node_ref


def _render_node(node: TopologyNode) -> str:
    """Render a single node with shape and status fill"""
    style = NODE_STYLE[node.kind]
    stroke = style.get("stroke") or node.color or node_fill(node)
    parts = [
        f"shape: {D2_SHAPE_MAP[node.kind]}",
        f"style: {{ fill: '{node_fill(node)}'; stroke: '{stroke}' }}",
    ]
    if node.description:
        parts.append(f'tooltip: "{_escape(node.description)}"')
    return f'{_sanitize_id(node.id)}: "{_escape(node.label)}" {{ {"; ".join(parts)} }}'


def _render_edge(edge: TopologyEdge, container_of: Dict[str, str]) -> str:
    source = _path(edge.source, container_of)
    target = _path(edge.target, container_of)
    style = f"stroke: '{edge.color}'; stroke-width: {edge.stroke_width:g}"
    if edge.animated:
        style += "; animated: true"
    return f"{source} -> {target}: {{ style: {{ {style} }} }}"
