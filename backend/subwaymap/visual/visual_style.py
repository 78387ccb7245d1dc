from typing import Dict, Optional, Tuple

from subwaymap.ir.topology import NodeKind, ServiceStatus, TopologyNode


# Subway line colors
LINE_COLORS = {
    "GLOBAL": "#4A90E2",
    "WORKSTATION": "#C97C84",
    "COB": "#F5A623",
    "FXL": "#FFD700",
    "EISL_API": "#7ED321",
    "CARMA": "#50C8E8",
    "EISL_MSG": "#BD10E0",
    "EISL_FILES": "#5A9FD4",
    "IMPACT": "#89CFF0",
}

FLOW_COLORS = {
    "INBOUND": "#10b981",
    "OUTBOUND": "#ef4444",
    "BIDIRECTIONAL": "#f59e0b",
}

STATUS_STYLE = {
    ServiceStatus.HEALTHY: {
        "color": "#10b981",
        "background": "rgba(16, 185, 129, 0.1)",
        "label": "Healthy",
    },
    ServiceStatus.WARNING: {
        "color": "#f59e0b",
        "background": "rgba(245, 158, 11, 0.1)",
        "label": "Warning",
    },
    ServiceStatus.CRITICAL: {
        "color": "#ef4444",
        "background": "rgba(239, 68, 68, 0.1)",
        "label": "Critical",
    },
}

NODE_STYLE = {
    NodeKind.ENGINE: {
        "shape": "rounded_rect",
        "fill": "rgba(255, 255, 255, 0.95)",
        "stroke": "#000000",
        "stroke_width": 4,
        "caption": "Engine",
    },
    NodeKind.ROUTER: {
        "shape": "pill",
        "fill": "rgba(0, 0, 0, 0.05)",
        "stroke": "#000000",
        "stroke_width": 2,
        "caption": "Router",
    },
    NodeKind.SERVICE: {
        "shape": "circle",
        "stroke_width": 4,
        "caption": "",
    },
    NodeKind.DATABASE: {
        "shape": "circle",
        "stroke_width": 4,
        "caption": "",
    },
    NodeKind.QUEUE: {
        "shape": "circle",
        "stroke_width": 4,
        "caption": "",
    },
}

HUB_NODE_ID = "ubs"
DEFAULT_MINIMAP_COLOR = "#10b981"

# (width, height) used for cluster boxes and as the layout default
NODE_SIZES: Dict[str, Tuple[float, float]] = {
    HUB_NODE_ID: (250, 200),
    NodeKind.ENGINE.value: (250, 200),
    NodeKind.ROUTER.value: (200, 100),
    NodeKind.SERVICE.value: (150, 80),
    NodeKind.DATABASE.value: (150, 80),
    NodeKind.QUEUE.value: (150, 80),
}


def node_size(
    node: TopologyNode,
    overrides: Optional[Dict[str, Tuple[float, float]]] = None,
) -> Tuple[float, float]:
    """
    Resolve the box size of a node.

    Explicit width/height on the node win, then the override table
    (node id before kind), then NODE_SIZES.
    """
    if node.width is not None and node.height is not None:
        return node.width, node.height

    for table in (overrides or {}, NODE_SIZES):
        if node.id in table:
            return table[node.id]
        if node.kind.value in table:
            return table[node.kind.value]

    return NODE_SIZES[NodeKind.SERVICE.value]


def status_color(status: ServiceStatus) -> str:
    return STATUS_STYLE[status]["color"]


def node_fill(node: TopologyNode) -> str:
    if node.tracks_status:
        return status_color(node.status)
    return NODE_STYLE[node.kind]["fill"]


def minimap_color(node: TopologyNode) -> str:
    if not node.tracks_status:
        return "#000000"
    return node.color or DEFAULT_MINIMAP_COLOR
