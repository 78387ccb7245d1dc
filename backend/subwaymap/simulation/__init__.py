from subwaymap.simulation.status import (
    StatusSimulator,
    randomize_statuses,
    reset_statuses,
    tick,
    weighted_status,
)

__all__ = [
    "StatusSimulator",
    "randomize_statuses",
    "reset_statuses",
    "tick",
    "weighted_status",
]
