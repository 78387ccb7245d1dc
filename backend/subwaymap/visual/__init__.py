# Visual styling: colors, status palette and node geometry shared by the
# layout, cluster and rendering code

from subwaymap.visual.visual_style import (
    FLOW_COLORS,
    LINE_COLORS,
    NODE_SIZES,
    NODE_STYLE,
    STATUS_STYLE,
    minimap_color,
    node_fill,
    node_size,
    status_color,
)

__all__ = [
    "FLOW_COLORS",
    "LINE_COLORS",
    "NODE_SIZES",
    "NODE_STYLE",
    "STATUS_STYLE",
    "minimap_color",
    "node_fill",
    "node_size",
    "status_color",
]
