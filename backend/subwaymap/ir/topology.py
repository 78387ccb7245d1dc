from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class NodeKind(Enum):
    ENGINE = "engine"
    ROUTER = "router"
    SERVICE = "service"
    DATABASE = "database"
    QUEUE = "queue"


class ServiceStatus(Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class FlowDirection(Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


@dataclass
class Position:
    x: float
    y: float


@dataclass
class TopologyNode:
    id: str
    label: str
    kind: NodeKind = NodeKind.SERVICE
    color: Optional[str] = None             # line color
    status: ServiceStatus = ServiceStatus.HEALTHY
    description: str = ""
    group: Optional[str] = None             # line / cluster name
    position: Optional[Position] = None     # top-left; None -> auto layout
    width: Optional[float] = None
    height: Optional[float] = None

    @property
    def tracks_status(self) -> bool:
        return self.kind not in (NodeKind.ENGINE, NodeKind.ROUTER)


@dataclass
class TopologyEdge:
    id: str
    source: str
    target: str
    color: str = "#000000"
    stroke_width: float = 2
    animated: bool = True
    flow: Optional[FlowDirection] = None


@dataclass
class ClusterDef:
    name: str
    color: str
    member_ids: List[str] = field(default_factory=list)
    description: str = ""
    padding: float = 50


@dataclass
class LegendGroup:
    name: str
    color: str
    entries: List[str] = field(default_factory=list)


@dataclass
class LayoutOptions:
    rankdir: str = "LR"                     # LR | TB | RL | BT
    ranksep: float = 120
    nodesep: float = 120
    # keyed by node id or NodeKind value; node id wins
    sizes: Dict[str, Tuple[float, float]] = field(default_factory=dict)


@dataclass
class Topology:
    id: str
    title: str
    subtitle: str = ""
    nodes: List[TopologyNode] = field(default_factory=list)
    edges: List[TopologyEdge] = field(default_factory=list)
    clusters: List[ClusterDef] = field(default_factory=list)
    legend: List[LegendGroup] = field(default_factory=list)
    layout: Optional[LayoutOptions] = None
    flow_colors: Dict[str, str] = field(default_factory=dict)

    def node_index(self) -> Dict[str, TopologyNode]:
        return {n.id: n for n in self.nodes}

    def get_node(self, node_id: str) -> Optional[TopologyNode]:
        return self.node_index().get(node_id)

    def status_map(self) -> Dict[str, ServiceStatus]:
        return {n.id: n.status for n in self.nodes if n.tracks_status}
