class TopologyError(Exception):
    """Base class for topology lookup and loading failures."""


class UnknownMapError(TopologyError, KeyError):
    def __init__(self, map_id: str):
        self.map_id = map_id
        super().__init__(f"Map '{map_id}' is not registered")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class FixtureError(TopologyError, ValueError):
    """Raised when a services fixture is missing or malformed."""
