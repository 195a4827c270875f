from abc import ABC, abstractmethod
from typing import Any, List, Optional, TypeVar

from graphwire.domain.models import GraphNode, WireOption

T = TypeVar("T")


class IContainer(ABC):
    """Abstract interface for the provider registry and its queries."""

    @abstractmethod
    def register(self, provider: Any, *options: WireOption, contract: Optional[Any] = None) -> None:
        """Register a factory or a pre-built instance.

        Args:
            provider: A factory callable or a pre-built instance.
            *options: Wire options; at most one output option, and it must be last.
            contract: Explicit output type when it cannot be read from the provider.
        """

    @abstractmethod
    def resolve_all(self) -> None:
        """Resolve every factory-backed node and freeze registration."""

    @abstractmethod
    def retrieve(self, contract: Any) -> List[Any]:
        """Return every instance satisfying the contract, priority-ordered.

        Args:
            contract: The requested type or an explicit ``Contract``.
        """

    @abstractmethod
    def retrieve_one(self, contract: Any) -> Any:
        """Return the first instance satisfying the contract.

        Args:
            contract: The requested type or an explicit ``Contract``.
        """


class IResolver(ABC):
    """Abstract interface for dependency edge resolution."""

    @abstractmethod
    def resolve(self, node: GraphNode, chain: List[GraphNode]) -> None:
        """Bind every declared input of a node to a dependency edge.

        Args:
            node: The node to resolve.
            chain: Nodes currently being resolved, outermost first.

        Raises:
            UnmetDependencyError: If an input has no candidate and no usable default.
            AmbiguousDependencyError: If several candidates match and none is primary.
            CycleError: If a candidate is already on the chain.
        """

    @abstractmethod
    def resolve_all(self) -> None:
        """Resolve every factory-backed node in registration order."""


class IInstantiator(ABC):
    """Abstract interface for building node values in dependency order."""

    @abstractmethod
    def instantiate(self, node: GraphNode) -> None:
        """Build a node's value after all of its dependencies.

        Args:
            node: A resolved node.
        """
