"""
Service data-flow map built from the static services fixture.

Inbound traffic runs gateway -> domain APIs -> Kafka -> director (inbound)
-> MQ -> engine; outbound runs engine -> MQ -> director (outbound) -> Kafka
-> data loaders -> Postgres -> APIs -> gateway.
"""

import json
import random
from pathlib import Path
from typing import Dict, List, Union

import yaml

from subwaymap.ir.errors import FixtureError
from subwaymap.ir.topology import (
    FlowDirection,
    LayoutOptions,
    LegendGroup,
    NodeKind,
    Topology,
    TopologyEdge,
    TopologyNode,
)
from subwaymap.visual.visual_style import FLOW_COLORS

DOMAIN_KEYS = ("api", "confluent", "msk", "mq", "dataloader", "inbound-ds", "outbound-ds")

CORE_NODES = [
    ("api-gateway", "API Gateway"),
    ("director-inbound", "Director Server\n(Inbound)"),
    ("director-outbound", "Director Server\n(Outbound)"),
    ("engine", "Engine"),
]

DATAFLOW_LAYOUT = LayoutOptions(
    rankdir="LR",
    ranksep=120,
    nodesep=120,
    sizes={
        NodeKind.ENGINE.value: (250, 200),
        NodeKind.SERVICE.value: (80, 60),
        NodeKind.QUEUE.value: (80, 60),
        NodeKind.DATABASE.value: (80, 60),
    },
)

# (domain key, legend label, unit)
LEGEND_COUNTS = [
    ("api", "APIs", "services"),
    ("confluent", "Confluent/Kafka", "topics"),
    ("mq", "MQ", "queues"),
    ("msk", "MSK", "topics"),
    ("dataloader", "DataLoaders", "services"),
    ("inbound-ds", "Inbound DS", "services"),
    ("outbound-ds", "Outbound DS", "services"),
]


def load_services_fixture(path: Union[str, Path]) -> dict:
    """Read a services fixture (.json, .yaml or .yml) and check its shape."""
    path = Path(path)
    if not path.exists():
        raise FixtureError(f"Services fixture not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise FixtureError(f"Could not parse services fixture {path}: {e}") from e

    _check_shape(data, path)
    return data


def _check_shape(data, path: Path) -> None:
    if not isinstance(data, dict):
        raise FixtureError(f"{path}: top level must be a mapping")

    postgres = data.get("postgres", [])
    if not isinstance(postgres, list) or not all(isinstance(db, str) for db in postgres):
        raise FixtureError(f"{path}: 'postgres' must be a list of names")

    domains = data.get("domains")
    if not isinstance(domains, dict):
        raise FixtureError(f"{path}: 'domains' must be a mapping")

    for name, domain in domains.items():
        if not isinstance(name, str):
            raise FixtureError(f"{path}: domain name {name!r} must be a string")
        if not isinstance(domain, dict):
            raise FixtureError(f"{path}: domain '{name}' must be a mapping")
        for key, values in domain.items():
            if key not in DOMAIN_KEYS:
                raise FixtureError(f"{path}: domain '{name}' has unknown key '{key}'")
            if not isinstance(values, list):
                raise FixtureError(f"{path}: domain '{name}.{key}' must be a list")
            if not all(isinstance(v, str) for v in values):
                raise FixtureError(f"{path}: domain '{name}.{key}' must list names as strings")


def domain_color(domain_name: str) -> str:
    """Random hue, seeded by the domain name so it is stable across runs."""
    hue = random.Random(domain_name).random() * 360
    return f"hsl({hue:.0f}, 70%, 60%)"


class _EdgeFactory:
    def __init__(self):
        self._counter = 0
        self.edges: List[TopologyEdge] = []

    def add(self, source: str, target: str, flow: FlowDirection) -> None:
        color = FLOW_COLORS["INBOUND"] if flow == FlowDirection.INBOUND else FLOW_COLORS["OUTBOUND"]
        self.edges.append(TopologyEdge(
            id=f"e-{self._counter}",
            source=source,
            target=target,
            color=color,
            stroke_width=2,
            flow=flow,
        ))
        self._counter += 1


def build_dataflow(services: dict) -> Topology:
    inbound, outbound = FlowDirection.INBOUND, FlowDirection.OUTBOUND
    postgres: List[str] = services.get("postgres", [])
    domains: Dict[str, dict] = services["domains"]

    nodes: List[TopologyNode] = [
        TopologyNode(id=node_id, label=label, kind=NodeKind.ENGINE, description=label.replace("\n", " "))
        for node_id, label in CORE_NODES
    ]
    for db in postgres:
        nodes.append(TopologyNode(
            id=f"db-{db}",
            label=f"{db.upper()}\nDB",
            kind=NodeKind.ENGINE,
            description=f"{db.upper()} - PostgreSQL Database",
        ))

    edges = _EdgeFactory()

    for domain_name, domain in domains.items():
        color = domain_color(domain_name)
        apis = domain.get("api", [])
        confluent = domain.get("confluent", [])

        def service(node_id: str, label: str, kind: NodeKind, source_name: str) -> None:
            nodes.append(TopologyNode(
                id=node_id,
                label=label,
                kind=kind,
                color=color,
                description=source_name,
                group=domain_name,
            ))

        for idx, api in enumerate(apis):
            api_id = f"api-{domain_name}-{idx}"
            service(api_id, f"API\n{idx + 1}", NodeKind.SERVICE, api)
            edges.add("api-gateway", api_id, inbound)

        for idx, topic in enumerate(confluent):
            conf_id = f"conf-{domain_name}-{idx}"
            service(conf_id, f"K{idx + 1}", NodeKind.QUEUE, topic)
            if idx < len(apis):
                edges.add(f"api-{domain_name}-{idx}", conf_id, inbound)
            edges.add(conf_id, "director-inbound", inbound)

        for idx, topic in enumerate(domain.get("msk", [])):
            service(f"msk-{domain_name}-{idx}", f"MSK{idx + 1}", NodeKind.QUEUE, topic)

        for idx, queue in enumerate(domain.get("mq", [])):
            mq_id = f"mq-{domain_name}-{idx}"
            service(mq_id, f"MQ{idx + 1}", NodeKind.QUEUE, queue)
            # Only the first queue of a domain carries traffic
            if idx == 0:
                edges.add("director-inbound", mq_id, inbound)
                edges.add(mq_id, "engine", inbound)
                edges.add("engine", mq_id, outbound)
                edges.add(mq_id, "director-outbound", outbound)

        for idx, loader in enumerate(domain.get("dataloader", [])):
            loader_id = f"loader-{domain_name}-{idx}"
            service(loader_id, f"DL{idx + 1}", NodeKind.SERVICE, loader)

            if idx < len(confluent):
                conf_id = f"conf-{domain_name}-{idx}"
                edges.add("director-outbound", conf_id, outbound)
                edges.add(conf_id, loader_id, outbound)

            db_match = next((db for db in postgres if db in loader), None)
            if db_match:
                edges.add(loader_id, f"db-{db_match}", outbound)
                if idx < len(apis):
                    api_id = f"api-{domain_name}-{idx}"
                    edges.add(f"db-{db_match}", api_id, outbound)
                    edges.add(api_id, "api-gateway", outbound)

    return Topology(
        id="dataflow",
        title="Service Data Flow",
        subtitle="Real-time service monitoring",
        nodes=nodes,
        edges=edges.edges,
        legend=_legend(postgres, domains),
        layout=DATAFLOW_LAYOUT,
        flow_colors={"Inbound": FLOW_COLORS["INBOUND"], "Outbound": FLOW_COLORS["OUTBOUND"]},
    )


def _legend(postgres: List[str], domains: Dict[str, dict]) -> List[LegendGroup]:
    groups = [
        LegendGroup(
            name="Core Infrastructure",
            color="#000000",
            entries=[label.replace("\n", " ") for _, label in CORE_NODES],
        ),
        LegendGroup(
            name="Databases",
            color="#000000",
            entries=[f"{db.upper()} - PostgreSQL Database" for db in postgres],
        ),
    ]
    for domain_name, domain in domains.items():
        entries = [
            f"{label}: {len(domain[key])} {unit}"
            for key, label, unit in LEGEND_COUNTS
            if domain.get(key)
        ]
        groups.append(LegendGroup(
            name=domain_name.capitalize(),
            color=domain_color(domain_name),
            entries=entries,
        ))
    return groups


def build_dataflow_from_fixture(path: Union[str, Path]) -> Topology:
    return build_dataflow(load_services_fixture(path))
