"""
Cosmetic status randomizer.

Statuses are decorative: nothing here observes a real system. Engines and
routers never change.
"""

import random
from typing import Dict, Optional, Sequence, Tuple, Union

from subwaymap.config import STATUS_CHANGE_PROBABILITY, STATUS_RANDOM_SEED, STATUS_TICK_INTERVAL_MS
from subwaymap.ir.topology import ServiceStatus, Topology

STATUSES: Tuple[ServiceStatus, ...] = (
    ServiceStatus.HEALTHY,
    ServiceStatus.WARNING,
    ServiceStatus.CRITICAL,
)

# healthy, warning, critical
DEFAULT_WEIGHTS = (0.7, 0.2, 0.1)


def randomize_statuses(topology: Topology, rng: random.Random) -> Dict[str, ServiceStatus]:
    """Give every status-tracking node a uniformly random status."""
    assigned: Dict[str, ServiceStatus] = {}
    for node in topology.nodes:
        if not node.tracks_status:
            continue
        node.status = rng.choice(STATUSES)
        assigned[node.id] = node.status
    return assigned


def weighted_status(r: float, weights: Sequence[float] = DEFAULT_WEIGHTS) -> ServiceStatus:
    _, w_warning, w_critical = weights
    if r < w_critical:
        return ServiceStatus.CRITICAL
    if r < w_warning + w_critical:
        return ServiceStatus.WARNING
    return ServiceStatus.HEALTHY


def tick(
    topology: Topology,
    rng: random.Random,
    change_probability: float = STATUS_CHANGE_PROBABILITY,
    weights: Sequence[float] = DEFAULT_WEIGHTS,
) -> Dict[str, ServiceStatus]:
    """
    One timer step: each status-tracking node is re-drawn with probability
    ``change_probability`` from the weighted distribution (mostly healthy).

    Returns only the nodes that were re-drawn, even if the new status equals
    the old one.
    """
    changed: Dict[str, ServiceStatus] = {}
    for node in topology.nodes:
        if not node.tracks_status:
            continue
        if rng.random() < change_probability:
            node.status = weighted_status(rng.random(), weights)
            changed[node.id] = node.status
    return changed


def reset_statuses(topology: Topology) -> Dict[str, ServiceStatus]:
    reset: Dict[str, ServiceStatus] = {}
    for node in topology.nodes:
        if node.tracks_status:
            node.status = ServiceStatus.HEALTHY
            reset[node.id] = node.status
    return reset


class StatusSimulator:
    """Owns the random source and timer settings for the status repaint loop."""

    def __init__(
        self,
        seed: Optional[Union[int, str]] = STATUS_RANDOM_SEED,
        interval_ms: int = STATUS_TICK_INTERVAL_MS,
        change_probability: float = STATUS_CHANGE_PROBABILITY,
        weights: Sequence[float] = DEFAULT_WEIGHTS,
    ):
        if not 0 <= change_probability <= 1:
            raise ValueError(f"change_probability must be within [0, 1], got {change_probability}")
        if len(weights) != 3 or any(w < 0 for w in weights):
            raise ValueError(f"weights must be three non-negative numbers, got {weights}")
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        self.rng = random.Random(seed)
        self.interval_ms = interval_ms
        self.change_probability = change_probability
        self.weights = tuple(weights)

    def randomize(self, topology: Topology) -> Dict[str, ServiceStatus]:
        return randomize_statuses(topology, self.rng)

    def tick(self, topology: Topology) -> Dict[str, ServiceStatus]:
        return tick(topology, self.rng, self.change_probability, self.weights)

    def reset(self, topology: Topology) -> Dict[str, ServiceStatus]:
        return reset_statuses(topology)
