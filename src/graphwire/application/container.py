import logging
from typing import Any, List, Optional, Tuple

from graphwire.application.descriptor_parser import qualified_name
from graphwire.application.instantiator import Instantiator
from graphwire.application.registry import ProviderRegistry
from graphwire.application.resolver import DependencyResolver
from graphwire.domain import (
    ContainerSettings,
    ContainerStateError,
    Contract,
    GraphNode,
    IContainer,
    IResolver,
    ProviderKey,
    Registration,
    UnmetDependencyError,
    WireOption,
)

logger = logging.getLogger(__name__)


class DIContainer(IContainer):
    """Main dependency injection container.

    Orchestrates registration, the single resolution pass and retrieval.
    Every resolved node is a process-wide singleton built at most once.
    The container is constructed explicitly and passed through the
    bootstrap sequence; there is no global instance.

    Attributes:
        _settings: Active profile and eager flag.
        _registry: Table of provider candidates.
        _resolver: Component binding inputs to dependency edges.
        _instantiator: Component building values in dependency order.
        _resolved: Whether ``resolve_all()`` completed.
    """

    def __init__(self, settings: Optional[ContainerSettings] = None) -> None:
        """Initialize the container with an empty registry.

        Args:
            settings: Container configuration; defaults to no profile, lazy instantiation.
        """
        self._settings = settings or ContainerSettings()
        self._registry = ProviderRegistry()
        self._resolver: IResolver = DependencyResolver(self._registry, self._settings.profile)
        self._instantiator = Instantiator()
        self._resolved = False

    @property
    def settings(self) -> ContainerSettings:
        return self._settings

    @property
    def profile(self) -> str:
        return self._settings.profile

    @property
    def is_resolved(self) -> bool:
        return self._resolved

    @property
    def nodes(self) -> List[GraphNode]:
        return self._registry.nodes

    @property
    def registrations(self) -> List[Registration]:
        return self._registry.registrations

    def register(self, provider: Any, *options: WireOption, contract: Optional[Any] = None) -> None:
        """Register a factory or a pre-built instance.

        Factories are functions, methods or classes; their inputs are read
        from type hints. Anything else is registered as a pre-built instance.

        Args:
            provider: The factory or instance.
            *options: Wire options; input options apply positionally, and a
                single output option may come last.
            contract: Explicit output annotation when it cannot be read from
                the provider.

        Raises:
            ConfigurationError: If the registration is malformed.
            ContainerStateError: If ``resolve_all()`` already ran.

        Example:
            >>> container.register(DatabaseConfig())
            >>> container.register(new_connection, name_out("primary"))
            >>> container.register(new_repository, name_in("primary"))
        """
        if self._resolved:
            raise ContainerStateError("cannot register providers after resolve_all()")
        self._registry.register(provider, *options, contract=contract)

    def register_all(self, *providers: Any) -> None:
        """Register several providers without options.

        Example:
            >>> container.register_all(new_repository, new_service, Settings())
        """
        for provider in providers:
            self.register(provider)

    def resolve_all(self) -> None:
        """Resolve the whole graph and freeze registration.

        Runs once; later calls are no-ops. With ``settings.eager`` every
        node is instantiated right away.

        Raises:
            UnmetDependencyError: If an input cannot be satisfied.
            AmbiguousDependencyError: If an input has several candidates and no primary.
            DefaultValueMismatchError: If a default does not match its input.
            LazyDependencyError: If lazy wiring does not match on both ends.
            CycleError: If a node depends on itself through other nodes.
        """
        if self._resolved:
            return
        self._resolver.resolve_all()
        self._resolved = True
        if self._settings.eager:
            self.instantiate_all()

    def instantiate_all(self) -> None:
        """Instantiate every registered node in registration order.

        Raises:
            ContainerStateError: If ``resolve_all()`` has not run.
            InstantiationError: If a factory raises.
        """
        self._ensure_resolved()
        for node in self._registry.nodes:
            self._instantiator.instantiate(node)
        logger.info("Instantiated %d provider(s)", len(self._registry.nodes))

    def retrieve(self, contract: Any) -> List[Any]:
        """Return every instance satisfying a contract.

        Nodes are scanned in registration order and built on demand.
        Values exposing ``order()`` come first, ascending by order (ties
        keep registration order), followed by all other values.

        Args:
            contract: The requested type, or a ``Contract`` with an explicit predicate.

        Returns:
            The matching instances.

        Raises:
            ContainerStateError: If ``resolve_all()`` has not run.

        Example:
            >>> for plugin in container.retrieve(Plugin):
            ...     plugin.load()
        """
        self._ensure_resolved()
        matcher = Contract.of(contract)

        ordered: List[Tuple[int, Any]] = []
        unordered: List[Any] = []
        for node in self._registry.nodes:
            if not matcher.matches(node.output_type):
                continue
            value = self._instantiator.value_of(node)
            if node.order is not None:
                ordered.append((node.order, value))
            else:
                unordered.append(value)

        ordered.sort(key=lambda pair: pair[0])
        return [value for _, value in ordered] + unordered

    def retrieve_one(self, contract: Any) -> Any:
        """Return the first instance satisfying a contract.

        Args:
            contract: The requested type, or a ``Contract``.

        Returns:
            The highest-priority match.

        Raises:
            UnmetDependencyError: If nothing matches.
        """
        values = self.retrieve(contract)
        if not values:
            contract_type = Contract.of(contract).contract_type
            raise UnmetDependencyError(ProviderKey(identity=qualified_name(contract_type)), "retrieve")
        return values[0]

    def clear(self) -> None:
        """Drop every registration and built value.

        Useful for testing or resetting the container state.
        """
        self._registry = ProviderRegistry()
        self._resolver = DependencyResolver(self._registry, self._settings.profile)
        self._instantiator = Instantiator()
        self._resolved = False

    def _ensure_resolved(self) -> None:
        if not self._resolved:
            raise ContainerStateError("resolve_all() must run before instances are retrieved")
