from pydantic import BaseModel
from typing import Dict, List


class MapSummary(BaseModel):
    id: str
    title: str
    subtitle: str = ""
    node_count: int
    edge_count: int
    cluster_count: int
    auto_layout: bool = False


class MapListResponse(BaseModel):
    default: str
    maps: List[MapSummary]


class StatusUpdateResponse(BaseModel):
    """Statuses assigned by one randomize / tick / reset call"""
    map_id: str
    statuses: Dict[str, str]  # {node_id: "healthy" | "warning" | "critical"}
    changed: int
