from subwaymap.ir.errors import FixtureError, TopologyError, UnknownMapError
from subwaymap.ir.topology import (
    ClusterDef,
    FlowDirection,
    LayoutOptions,
    LegendGroup,
    NodeKind,
    Position,
    ServiceStatus,
    Topology,
    TopologyEdge,
    TopologyNode,
)
