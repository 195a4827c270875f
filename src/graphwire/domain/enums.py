from enum import Enum


class WireDirection(str, Enum):
    """Direction of a wire option.

    Attributes:
        IN: Applies to one positional input of a factory.
        OUT: Applies to the value the provider produces.
    """

    IN = "in"
    OUT = "out"

    def __str__(self) -> str:
        return self.value


class ResolutionState(str, Enum):
    """Resolution progress of a graph node.

    Attributes:
        UNRESOLVED: Edges have not been computed yet.
        RESOLVING: The node is on the active resolution chain.
        RESOLVED: Every input has been bound to a dependency edge.
    """

    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"

    def __str__(self) -> str:
        return self.value


class InstantiationState(str, Enum):
    """Instantiation progress of a graph node."""

    PENDING = "pending"
    INSTANTIATED = "instantiated"

    def __str__(self) -> str:
        return self.value
