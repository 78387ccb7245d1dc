from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from subwaymap.compiler.clusters import ClusterBox, Extent, compute_cluster_boxes, diagram_extent
from subwaymap.compiler.layout import layered_layout
from subwaymap.ir.topology import LayoutOptions, Position, Topology, TopologyEdge, TopologyNode
from subwaymap.validation import TopologyValidationResult, validate_topology
from subwaymap.visual.visual_style import node_size


@dataclass
class CompiledMap:
    topology: Topology
    positions: Dict[str, Position]
    edges: List[TopologyEdge]
    clusters: List[ClusterBox]
    extent: Extent
    validation: TopologyValidationResult

    def size_of(self, node: TopologyNode) -> Tuple[float, float]:
        return size_fn(self.topology)(node)


def size_fn(topology: Topology) -> Callable[[TopologyNode], Tuple[float, float]]:
    overrides = topology.layout.sizes if topology.layout else None
    return lambda node: node_size(node, overrides)


def renderable_edges(topology: Topology) -> List[TopologyEdge]:
    """Edges whose endpoints both exist; the rest are dropped with a warning."""
    node_ids = {n.id for n in topology.nodes}
    kept: List[TopologyEdge] = []
    for edge in topology.edges:
        if edge.source in node_ids and edge.target in node_ids:
            kept.append(edge)
        else:
            print(f"[COMPILER] Dropping edge '{edge.id}' ({edge.source} -> {edge.target}) on '{topology.id}'")
    return kept


def resolve_positions(topology: Topology, edges: List[TopologyEdge]) -> Dict[str, Position]:
    if topology.layout is not None:
        return layered_layout(topology.nodes, edges, topology.layout)

    positions = {n.id: n.position for n in topology.nodes if n.position is not None}
    loose = [n for n in topology.nodes if n.position is None]
    if not loose:
        return positions

    # Unpositioned nodes on a manual map are laid out on their own and
    # parked below everything that was placed by hand.
    options = LayoutOptions()
    loose_positions = layered_layout(loose, edges, options)

    sizes = size_fn(topology)
    floor = max(
        (positions[n.id].y + sizes(n)[1] for n in topology.nodes if n.id in positions),
        default=0,
    )
    left = min((p.x for p in positions.values()), default=0)
    top = min(p.y for p in loose_positions.values())
    loose_left = min(p.x for p in loose_positions.values())

    for nid, p in loose_positions.items():
        positions[nid] = Position(
            x=p.x - loose_left + left,
            y=p.y - top + floor + options.ranksep,
        )
    return positions


def compile_map(topology: Topology) -> CompiledMap:
    """
    Topology -> positioned map ready for rendering.

    validate -> drop dangling edges -> layout -> cluster boxes -> canvas extent
    """
    validation = validate_topology(topology)
    if validation.issues:
        print(f"[VALIDATOR] {topology.id}: {validation.get_summary()}")
        for issue in validation.issues:
            if issue.severity.value != "info":
                print(f"[VALIDATOR]   - [{issue.code}] {issue.message}")

    edges = renderable_edges(topology)
    positions = resolve_positions(topology, edges)

    sizes = size_fn(topology)
    clusters = compute_cluster_boxes(topology, positions, size_of=sizes)
    extent = diagram_extent(topology.nodes, positions, clusters, size_of=sizes)

    return CompiledMap(
        topology=topology,
        positions=positions,
        edges=edges,
        clusters=clusters,
        extent=extent,
        validation=validation,
    )
