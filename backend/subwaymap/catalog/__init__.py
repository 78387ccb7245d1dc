# backend/subwaymap/catalog/__init__.py
"""
Topology catalog

Hard-coded subway maps plus the fixture-driven data-flow map, exposed
through a process-wide registry.
"""

from subwaymap.catalog.dataflow import (
    build_dataflow,
    build_dataflow_from_fixture,
    load_services_fixture,
)
from subwaymap.catalog.registry import (
    MapRegistry,
    get_map_registry,
    register_default_maps,
    reset_map_registry,
)
from subwaymap.catalog.wmap import build_wmap

__all__ = [
    "MapRegistry",
    "build_dataflow",
    "build_dataflow_from_fixture",
    "build_wmap",
    "get_map_registry",
    "load_services_fixture",
    "register_default_maps",
    "reset_map_registry",
]
