from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from subwaymap.ir.topology import Position, Topology, TopologyNode
from subwaymap.visual.visual_style import node_size


@dataclass
class ClusterBox:
    name: str
    color: str
    x: float
    y: float
    width: float
    height: float
    description: str = ""


@dataclass
class Extent:
    x: float
    y: float
    width: float
    height: float


SizeFn = Callable[[TopologyNode], Tuple[float, float]]


def cluster_bounding_box(
    nodes: Iterable[TopologyNode],
    member_ids: Iterable[str],
    positions: Dict[str, Position],
    padding: float = 50,
    size_of: SizeFn = node_size,
) -> Tuple[float, float, float, float]:
    """
    Smallest axis-aligned rectangle covering every positioned member box,
    grown by ``padding`` on each side. Returns (x, y, width, height).

    Members without a position are ignored; no members gives (0, 0, 0, 0).
    """
    wanted = set(member_ids)
    members = [n for n in nodes if n.id in wanted and n.id in positions]
    if not members:
        return 0, 0, 0, 0

    min_x = min(positions[n.id].x for n in members)
    min_y = min(positions[n.id].y for n in members)
    max_x = max(positions[n.id].x + size_of(n)[0] for n in members)
    max_y = max(positions[n.id].y + size_of(n)[1] for n in members)

    return (
        min_x - padding,
        min_y - padding,
        max_x - min_x + padding * 2,
        max_y - min_y + padding * 2,
    )


def compute_cluster_boxes(
    topology: Topology,
    positions: Dict[str, Position],
    size_of: Optional[SizeFn] = None,
    padding: Optional[float] = None,
) -> List[ClusterBox]:
    """Resolve every ClusterDef of the topology into a drawable box."""
    size_of = size_of or node_size
    boxes: List[ClusterBox] = []
    for cluster in topology.clusters:
        x, y, w, h = cluster_bounding_box(
            topology.nodes,
            cluster.member_ids,
            positions,
            padding=cluster.padding if padding is None else padding,
            size_of=size_of,
        )
        boxes.append(ClusterBox(
            name=cluster.name,
            color=cluster.color,
            x=x,
            y=y,
            width=w,
            height=h,
            description=cluster.description,
        ))
    return boxes


def diagram_extent(
    nodes: Iterable[TopologyNode],
    positions: Dict[str, Position],
    boxes: Iterable[ClusterBox] = (),
    margin: float = 40,
    size_of: SizeFn = node_size,
) -> Extent:
    """Canvas rectangle covering all node boxes and non-empty cluster boxes."""
    rects = [
        (positions[n.id].x, positions[n.id].y, *size_of(n))
        for n in nodes
        if n.id in positions
    ]
    rects.extend((b.x, b.y, b.width, b.height) for b in boxes if b.width and b.height)

    if not rects:
        return Extent(0, 0, 0, 0)

    min_x = min(r[0] for r in rects)
    min_y = min(r[1] for r in rects)
    max_x = max(r[0] + r[2] for r in rects)
    max_y = max(r[1] + r[3] for r in rects)

    return Extent(
        x=min_x - margin,
        y=min_y - margin,
        width=max_x - min_x + margin * 2,
        height=max_y - min_y + margin * 2,
    )
