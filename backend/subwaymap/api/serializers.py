from enum import Enum
from typing import Any

from subwaymap.compiler.compiler import CompiledMap


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize_ir(obj: Any):
    """
    Safely serialize topology objects into JSON-compatible structures.
    Deterministic.
    Tolerant to primitives.
    """

    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    if isinstance(obj, Enum):
        return obj.value

    # Size tables hold (w, h) tuples
    if isinstance(obj, (list, tuple)):
        return [serialize_ir(item) for item in obj]

    if isinstance(obj, dict):
        return {str(k): serialize_ir(v) for k, v in obj.items()}

    if hasattr(obj, "__dict__"):
        return {
            key: serialize_ir(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    return str(obj)


def serialize_compiled_map(compiled: CompiledMap) -> dict:
    topology = compiled.topology
    return {
        "id": topology.id,
        "title": topology.title,
        "subtitle": topology.subtitle,
        "layout": serialize_ir(topology.layout),
        "nodes": serialize_ir(topology.nodes),
        "edges": serialize_ir(compiled.edges),
        "positions": serialize_ir(compiled.positions),
        "clusters": serialize_ir(compiled.clusters),
        "extent": serialize_ir(compiled.extent),
        "legend": serialize_ir(topology.legend),
        "flow_colors": dict(topology.flow_colors),
        "validation": compiled.validation.to_dict(),
    }
