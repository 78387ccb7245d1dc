"""
WMAP Mag 7 subway map.

Hand-placed topology: the UBS engine on the left feeding ten colored
service lines. ``build_wmap(auto_layout=True)`` drops the manual positions
and lets the layered layout place everything instead.
"""

from typing import Dict, List, Optional

from subwaymap.config import CLUSTER_PADDING
from subwaymap.ir.topology import (
    ClusterDef,
    LayoutOptions,
    LegendGroup,
    NodeKind,
    Position,
    Topology,
    TopologyEdge,
    TopologyNode,
)
from subwaymap.visual.visual_style import LINE_COLORS

E, R, S, D, Q = NodeKind.ENGINE, NodeKind.ROUTER, NodeKind.SERVICE, NodeKind.DATABASE, NodeKind.QUEUE

# line key -> display name
LINES = {
    "GLOBAL": "Global",
    "WORKSTATION": "Workstation",
    "COB": "COB",
    "FXL": "FXL",
    "EISL_API": "EISL APIs",
    "CARMA": "CARMA",
    "EISL_MSG": "EISL Messaging",
    "EISL_FILES": "EISL Files",
    "IMPACT": "IMPACT",
    "GLOSS": "GLOSS",
    "REVPORT": "Revport",
}

# GLOSS and Revport are drawn in the IMPACT color
LINE_COLOR_KEY = {"GLOSS": "IMPACT", "REVPORT": "IMPACT"}

# (id, label, kind, line, x, y, description)
NODES = [
    ("ubs", "UBS", E, None, 50, 600, "Core engine"),

    ("G", "G", R, "GLOBAL", 520, 700, "Global Site Selector"),
    ("7", "7", S, "GLOBAL", 700, 570, "CA Layer 7 Gateway"),
    ("S-global", "S", S, "GLOBAL", 960, 655, "Siteminder Auth"),

    ("53-work", "53", S, "WORKSTATION", 700, -150, "Route53 DNS for Failover"),
    ("N-work", "N", S, "WORKSTATION", 850, -150, "Network Load Balancer"),
    ("PX", "PX", S, "WORKSTATION", 1000, -150, "Reverse Proxy for Auth"),
    ("A-work", "A", S, "WORKSTATION", 1000, 0, "Application Load Balancer"),
    ("S-work", "S", S, "WORKSTATION", 1000, 150, "ECS Services x14 (Cluster)"),
    ("C-work", "C", S, "WORKSTATION", 1150, 50, "Memcached Nodes x2"),
    ("D-work", "D", D, "WORKSTATION", 1150, 250, "Sybase Database Instance"),

    ("U-cob", "U", S, "COB", 660, 450, "COB UnqxrK App"),

    ("A-fxl", "A", S, "FXL", 750, 900, "Application Load Balancer"),
    ("W-fxl", "W", S, "FXL", 900, 900, "Web Server on EC2"),
    ("S-fxl", "S", S, "FXL", 1050, 800, "Scheduler Service on EC2"),
    ("F-fxl", "F", S, "FXL", 1200, 900, "Workflow Service on EC2"),
    ("I-fxl", "I", S, "FXL", 1350, 800, "Interfaces Service on EC2"),
    ("D-fxl", "D", D, "FXL", 1350, 1000, "MS SQL Server DB & RDS Standby"),

    ("Q-impact", "Q", Q, "IMPACT", 750, 1200, "Inbound IBM MQ"),
    ("SP-impact", "SP", S, "IMPACT", 900, 1350, "Stock Record Processing"),
    ("TP-impact", "TP", S, "IMPACT", 1050, 1200, "Trade & Settlement Processing"),
    ("UI-impact", "UI", S, "IMPACT", 750, 1500, "User Interface"),
    ("D-impact", "D", D, "IMPACT", 1050, 1500, "DB2 Database Instance"),

    ("Q-gloss", "Q", Q, "GLOSS", 750, 1800, "Inbound IBM MQ"),
    ("SP-gloss", "SP", S, "GLOSS", 900, 1950, "Stock Record Processing"),
    ("TP-gloss", "TP", S, "GLOSS", 1050, 1800, "Trade & Settlement Processing"),
    ("UI-gloss", "UI", S, "GLOSS", 750, 2100, "User Interface"),
    ("D-gloss", "D", D, "GLOSS", 1050, 2100, "Sybase Database Instance"),

    ("A0", "A0", S, "REVPORT", 750, 2400, "Application Load Balancer (Web)"),
    ("W-report", "W", S, "REVPORT", 900, 2400, "Web Server on EC2 x2"),
    ("A1", "A1", S, "REVPORT", 1050, 2300, "Application Load Balancer (Report)"),
    ("A2", "A2", S, "REVPORT", 1050, 2550, "Application Load Balancer (Jasper)"),
    ("RJ", "RJ", S, "REVPORT", 1200, 2300, "Revport Java App on EC2"),
    ("JR", "JR", S, "REVPORT", 1200, 2550, "Jasper Report App on EC2"),
    ("D-report", "D", D, "REVPORT", 1350, 2400, "RDS Aurora MySQL Cluster"),
    ("S3-report", "S3", S, "REVPORT", 1500, 2400, "S3 Bucket for Client Files"),

    ("F-files", "F", S, "EISL_FILES", 1350, -750, "IBM Sterling File Gateway"),
    ("NS", "NS", S, "EISL_FILES", 1500, -750, "Network Attached Storage"),
    ("D-files", "D", D, "EISL_FILES", 1500, -600, "PostgreSQL Database"),
    ("I-files", "I", S, "EISL_FILES", 1350, -450, "Informatica"),
    ("J-files", "J", S, "EISL_FILES", 1650, -450, "Java App on EC2"),

    ("N-api", "N", S, "EISL_API", 2000, 550, "Network Load Balancer"),
    ("M-api", "M", S, "EISL_API", 2150, 600, "Mulesoft Controller x3 & Workers x4"),
    ("C-api", "C", S, "EISL_API", 2150, 450, "IRIS Cache Nodes x2"),
    ("D-api", "D", D, "EISL_API", 2300, 450, "IRIS Data Nodes x2"),

    ("Q-msg", "Q", Q, "EISL_MSG", 2000, 1200, "Inbound IBM MQ"),
    ("N-msg", "N", S, "EISL_MSG", 2150, 1050, "Network Load Balancer"),
    ("X-msg", "X", Q, "EISL_MSG", 2300, 1050, "Amazon MQ Broker x2"),
    ("A-msg", "A", S, "EISL_MSG", 2150, 1200, "Application Load Balancer"),
    ("S-msg", "S", S, "EISL_MSG", 2300, 1200, "ECS Services x10 (Cluster)"),
    ("C-msg", "C", S, "EISL_MSG", 2150, 1350, "Elasticache for Redis Cluster"),
    ("D-msg", "D", D, "EISL_MSG", 2300, 1350, "RDS Aurora MySQL Cluster"),
    ("ES", "ES", S, "EISL_MSG", 2450, 1350, "Elasticsearch Cluster"),
    ("K-msg", "K", Q, "EISL_MSG", 2700, 1200, "Confluent Kafka Cluster"),

    ("IM", "IM", S, "CARMA", 2900, -100, "Import ETL Services x7"),
    ("CX", "CX", S, "CARMA", 3050, 0, "Command Services x11"),
    ("EQ", "EQ", Q, "CARMA", 3200, 0, "Domain Event SQS Queue"),
    ("FL", "FL", S, "CARMA", 3350, 0, "Event Forwarder Lambda"),
    ("S3-carma", "S3", S, "CARMA", 3350, 150, "S3 Bucket"),
    ("G-carma", "G", S, "CARMA", 2900, 250, "AWS API Gateway"),
    ("FQ", "FQ", Q, "CARMA", 3200, 250, "FIFO SQS Event Queue"),
    ("QY", "QY", S, "CARMA", 3050, 400, "Query Services x10"),
]

# (id, source, target, line); line None -> black trunk edge
EDGES = [
    ("e-ubs-g", "ubs", "G", None),
    ("e-ubs-7", "ubs", "7", None),
    ("e-ubs-s", "ubs", "S-global", None),
    ("e-ubs-u", "ubs", "U-cob", None),
    ("e-ubs-a-fxl", "ubs", "A-fxl", None),
    ("e-ubs-impact", "ubs", "Q-impact", None),
    ("e-ubs-gloss", "ubs", "Q-gloss", None),
    ("e-ubs-report", "ubs", "A0", None),
    ("e-G-IM-CARMA", "G", "IM", None),

    ("e-g-7", "G", "7", "GLOBAL"),
    ("e-7-s", "7", "S-global", "GLOBAL"),

    ("e-g-53", "G", "53-work", "WORKSTATION"),
    ("e-53-n", "53-work", "N-work", "WORKSTATION"),
    ("e-n-px", "N-work", "PX", "WORKSTATION"),
    ("e-px-a", "PX", "A-work", "WORKSTATION"),
    ("e-px-s-global", "PX", "S-global", "WORKSTATION"),
    ("e-53-a", "53-work", "A-work", "WORKSTATION"),
    ("e-a-c", "A-work", "C-work", "WORKSTATION"),
    ("e-c-s", "C-work", "S-work", "WORKSTATION"),
    ("e-s-d", "S-work", "D-work", "WORKSTATION"),
    ("e-7-s-work", "7", "S-work", "WORKSTATION"),

    ("e-s-a-fxl", "S-fxl", "A-fxl", "FXL"),
    ("e-a-w-fxl", "A-fxl", "W-fxl", "FXL"),
    ("e-s-f-fxl", "S-fxl", "F-fxl", "FXL"),
    ("e-f-i-fxl", "F-fxl", "I-fxl", "FXL"),
    ("e-i-d-fxl", "I-fxl", "D-fxl", "FXL"),
    ("e-i-q-msg", "I-fxl", "Q-msg", "FXL"),
    ("e-i-n-api", "I-fxl", "N-api", "FXL"),
    ("e-i-m-api", "I-fxl", "M-api", "FXL"),

    ("e-c-d-api", "C-api", "D-api", "EISL_API"),
    ("e-m-c-api", "M-api", "C-api", "EISL_API"),
    ("e-n-m-api", "N-api", "M-api", "EISL_API"),
    ("e-m-qy-api", "M-api", "QY", "EISL_API"),
    ("e-m-cx-api", "M-api", "CX", "EISL_API"),
    ("e-s-n-api", "S-global", "N-api", "EISL_API"),

    ("e-im-cx", "IM", "CX", "CARMA"),
    ("e-cx-eq", "CX", "EQ", "CARMA"),
    ("e-eq-fl", "EQ", "FL", "CARMA"),
    ("e-fl-s3", "FL", "S3-carma", "CARMA"),
    ("e-cx-g-carma", "CX", "G-carma", "CARMA"),
    ("e-g-fq", "G-carma", "FQ", "CARMA"),
    ("e-fq-qy", "FQ", "QY", "CARMA"),

    ("e-n-x-msg", "N-msg", "X-msg", "EISL_MSG"),
    ("e-x-q-msg", "X-msg", "Q-msg", "EISL_MSG"),
    ("e-q-a-msg", "Q-msg", "A-msg", "EISL_MSG"),
    ("e-a-s-msg", "A-msg", "S-msg", "EISL_MSG"),
    ("e-s-k-msg", "S-msg", "K-msg", "EISL_MSG"),
    ("e-k-ubs-msg", "K-msg", "ubs", "EISL_MSG"),
    ("e-a-c-msg", "A-msg", "C-msg", "EISL_MSG"),
    ("e-c-d-msg", "C-msg", "D-msg", "EISL_MSG"),
    ("e-d-es-msg", "D-msg", "ES", "EISL_MSG"),

    ("e-f-ns-files", "F-files", "NS", "EISL_FILES"),
    ("e-ns-d-files", "NS", "D-files", "EISL_FILES"),
    ("e-d-i-files", "D-files", "I-files", "EISL_FILES"),
    ("e-d-j-files", "D-files", "J-files", "EISL_FILES"),

    ("e-q-sp-impact", "Q-impact", "SP-impact", "IMPACT"),
    ("e-sp-tp-impact", "SP-impact", "TP-impact", "IMPACT"),
    ("e-sp-ui-impact", "SP-impact", "UI-impact", "IMPACT"),
    ("e-ui-d-impact", "UI-impact", "D-impact", "IMPACT"),

    ("e-q-sp-gloss", "Q-gloss", "SP-gloss", "GLOSS"),
    ("e-sp-tp-gloss", "SP-gloss", "TP-gloss", "GLOSS"),
    ("e-sp-ui-gloss", "SP-gloss", "UI-gloss", "GLOSS"),
    ("e-ui-d-gloss", "UI-gloss", "D-gloss", "GLOSS"),

    ("e-a0-w-report", "A0", "W-report", "REVPORT"),
    ("e-w-a1-report", "W-report", "A1", "REVPORT"),
    ("e-a1-rj-report", "A1", "RJ", "REVPORT"),
    ("e-rj-d-report", "RJ", "D-report", "REVPORT"),
    ("e-d-s3-report", "D-report", "S3-report", "REVPORT"),
    ("e-w-a2-report", "W-report", "A2", "REVPORT"),
    ("e-a2-jr-report", "A2", "JR", "REVPORT"),
]

# (line, description); members are every node on the line
CLUSTERS = [
    ("WORKSTATION", "Workstation services cluster"),
    ("FXL", "FXL services cluster"),
    ("EISL_API", "EISL API services"),
    ("CARMA", "CARMA services cluster"),
    ("EISL_MSG", "EISL Messaging services"),
    ("EISL_FILES", "EISL File services"),
    ("IMPACT", "IMPACT services"),
    ("GLOSS", "GLOSS services"),
    ("REVPORT", "Revport services"),
]

# Cluster padding on the auto-laid-out variant
AUTO_CLUSTER_PADDING = 120

AUTO_LAYOUT = LayoutOptions(
    rankdir="LR",
    ranksep=800,
    nodesep=400,
    sizes={
        "ubs": (250, 200),
        NodeKind.ROUTER.value: (200, 100),
        NodeKind.SERVICE.value: (180, 80),
        NodeKind.DATABASE.value: (180, 80),
        NodeKind.QUEUE.value: (180, 80),
    },
)


def line_color(line: Optional[str]) -> str:
    if line is None:
        return "#000000"
    return LINE_COLORS[LINE_COLOR_KEY.get(line, line)]


def _nodes(auto_layout: bool) -> List[TopologyNode]:
    return [
        TopologyNode(
            id=node_id,
            label=label,
            kind=kind,
            color=line_color(line) if line else None,
            description=description,
            group=LINES[line] if line else None,
            position=None if auto_layout else Position(x, y),
        )
        for node_id, label, kind, line, x, y, description in NODES
    ]


def _edges() -> List[TopologyEdge]:
    return [
        TopologyEdge(
            id=edge_id,
            source=source,
            target=target,
            color=line_color(line),
            stroke_width=2 if line is None else 3,
        )
        for edge_id, source, target, line in EDGES
    ]


def _clusters(padding: float) -> List[ClusterDef]:
    members: Dict[str, List[str]] = {}
    for node_id, _label, _kind, line, *_rest in NODES:
        if line:
            members.setdefault(line, []).append(node_id)
    return [
        ClusterDef(
            name=LINES[line],
            color=line_color(line),
            member_ids=members[line],
            description=description,
            padding=padding,
        )
        for line, description in CLUSTERS
    ]


def _legend() -> List[LegendGroup]:
    entries: Dict[str, List[str]] = {line: [] for line in LINES}
    for _node_id, label, _kind, line, _x, _y, description in NODES:
        if line:
            entries[line].append(f"{label} - {description}")
    return [
        LegendGroup(name=LINES[line], color=line_color(line), entries=entries[line])
        for line in LINES
    ]


def build_wmap(auto_layout: bool = False) -> Topology:
    """Fresh WMAP Mag 7 topology; every call returns independent node objects."""
    return Topology(
        id="wmap-auto" if auto_layout else "wmap",
        title="WMAP Mag 7 — Subway Map",
        subtitle="Service topology monitoring",
        nodes=_nodes(auto_layout),
        edges=_edges(),
        clusters=_clusters(AUTO_CLUSTER_PADDING if auto_layout else CLUSTER_PADDING),
        legend=_legend(),
        layout=AUTO_LAYOUT if auto_layout else None,
    )
