# backend/subwaymap/catalog/registry.py
"""
Map Registry - Central store for the topologies the app can render
"""

import threading
from typing import Dict, List, Optional

from subwaymap.ir.errors import UnknownMapError
from subwaymap.ir.topology import Topology


class MapRegistry:
    """
    Holds one live Topology per map id.

    Topologies are built once; the status simulator mutates node statuses
    on the registered instances in place.
    """

    def __init__(self):
        self.maps: Dict[str, Topology] = {}

    def register(self, topology: Topology) -> None:
        if topology.id in self.maps:
            print(f"[REGISTRY] Replacing map '{topology.id}'")
        self.maps[topology.id] = topology

    def get(self, map_id: str) -> Topology:
        topology = self.maps.get(map_id)
        if topology is None:
            raise UnknownMapError(map_id)
        return topology

    def __contains__(self, map_id: str) -> bool:
        return map_id in self.maps

    def ids(self) -> List[str]:
        return list(self.maps)

    def list_all(self) -> List[Topology]:
        return list(self.maps.values())


def register_default_maps(registry: MapRegistry) -> None:
    from subwaymap.catalog.dataflow import build_dataflow_from_fixture
    from subwaymap.catalog.wmap import build_wmap
    from subwaymap.config import SERVICES_FIXTURE_PATH

    registry.register(build_wmap())
    registry.register(build_wmap(auto_layout=True))
    registry.register(build_dataflow_from_fixture(SERVICES_FIXTURE_PATH))


# Global registry instance
_global_registry: Optional[MapRegistry] = None
_registry_lock = threading.Lock()


def get_map_registry() -> MapRegistry:
    """Get or create the global map registry"""
    global _global_registry
    with _registry_lock:
        if _global_registry is None:
            registry = MapRegistry()
            register_default_maps(registry)
            print(f"[REGISTRY] Loaded maps: {', '.join(registry.ids())}")
            _global_registry = registry
    return _global_registry


def reset_map_registry() -> None:
    """Drop the global registry so the next lookup rebuilds pristine maps."""
    global _global_registry
    with _registry_lock:
        _global_registry = None
