import logging
from typing import Any, List, Optional

from graphwire.application.circular_detector import check_cycle
from graphwire.application.descriptor_parser import describe_type, parse_value
from graphwire.application.lazy import Lazy
from graphwire.application.registry import ProviderRegistry, node_id
from graphwire.domain import (
    AmbiguousDependencyError,
    DefaultValueMismatchError,
    Descriptor,
    DescriptorError,
    GraphNode,
    InputSpec,
    InstantiationState,
    IResolver,
    LazyDependencyError,
    ProviderKey,
    ResolutionState,
    UnmetDependencyError,
    WireOption,
    satisfies,
)

logger = logging.getLogger(__name__)


class DependencyResolver(IResolver):
    """Binds every declared factory input to a dependency edge.

    Candidates for an input are looked up by ``ProviderKey`` and filtered by
    the active profile. Collection inputs aggregate every active candidate;
    other inputs need a single candidate or exactly one primary among them.
    Absent inputs fall back to a ``default()`` option, then to the
    parameter's own default.

    Attributes:
        _registry: The provider table to resolve against.
        _profile: Active profile gating candidates.
    """

    def __init__(self, registry: ProviderRegistry, profile: str = "") -> None:
        """Initialize the resolver.

        Args:
            registry: The provider table to resolve against.
            profile: Active profile gating candidates.
        """
        self._registry = registry
        self._profile = profile

    def resolve_all(self) -> None:
        """Resolve every factory-backed node in registration order.

        Pre-built nodes are resolved from the start. The first error aborts
        the whole pass.

        Raises:
            UnmetDependencyError: If an input cannot be satisfied.
            AmbiguousDependencyError: If an input has several candidates and no primary.
            DefaultValueMismatchError: If a default does not match its input.
            LazyDependencyError: If lazy wiring does not match on both ends.
            CycleError: If a node depends on itself through other nodes.
        """
        factory_nodes = self._registry.factory_nodes
        for node in factory_nodes:
            self.resolve(node, [])
        logger.info("Resolved %d provider(s) for profile '%s'", len(factory_nodes), self._profile)

    def resolve(self, node: GraphNode, chain: List[GraphNode]) -> None:
        """Resolve a node's inputs, recursing into unresolved candidates.

        Args:
            node: The node to resolve. Idempotent once resolved.
            chain: Nodes currently being resolved, outermost first.
        """
        if node.resolved:
            return

        inputs = node.signature.inputs if node.signature else ()
        if not inputs:
            node.resolution_state = ResolutionState.RESOLVED
            return

        node.resolution_state = ResolutionState.RESOLVING
        inner_chain = chain + [node]
        edges = []
        for position, spec in enumerate(inputs):
            option = node.input_option(position)
            key = ProviderKey.of(spec.descriptor, option.name if option else "")
            edges.append(self._resolve_input(node, spec, option, key, inner_chain))

        node.dependencies = edges
        node.resolution_state = ResolutionState.RESOLVED

    def _resolve_input(
        self,
        node: GraphNode,
        spec: InputSpec,
        option: Optional[WireOption],
        key: ProviderKey,
        chain: List[GraphNode],
    ) -> GraphNode:
        candidates = self._registry.candidates(key)

        if spec.descriptor.is_collection:
            if not candidates:
                return self._fallback(node, spec, option, key)
            return self._aggregate(node, spec, key, candidates, chain)

        # A plain input is never satisfied by a list provider
        plain = [candidate for candidate in candidates if not candidate.descriptor.is_collection]
        selected = self._select(node, key, plain)
        if selected is None:
            return self._fallback(node, spec, option, key)

        self._check_lazy(node, spec, selected)
        self._resolve_child(selected, chain)
        logger.debug("Bound %s.%s to %s", node.name, spec.name, selected.name)
        return selected

    def _select(self, node: GraphNode, key: ProviderKey, plain: List[GraphNode]) -> Optional[GraphNode]:
        # A sole primary decides the key; inactive, it leaves the input absent
        primaries = [candidate for candidate in plain if candidate.is_primary]
        if len(primaries) == 1:
            chosen = primaries[0]
            return chosen if self._registry.is_active(chosen, self._profile) else None

        active = [candidate for candidate in plain if self._registry.is_active(candidate, self._profile)]
        if not active:
            return None
        if len(active) == 1:
            return active[0]

        active_primaries = [candidate for candidate in active if candidate.is_primary]
        if len(active_primaries) != 1:
            raise AmbiguousDependencyError(key, node.name)
        return active_primaries[0]

    def _aggregate(
        self,
        node: GraphNode,
        spec: InputSpec,
        key: ProviderKey,
        candidates: List[GraphNode],
        chain: List[GraphNode],
    ) -> GraphNode:
        aggregator = GraphNode(
            id=f"{node.id}/{spec.name}",
            name=str(spec.descriptor) if not key.qualifier else f"list[{key}]",
            descriptor=spec.descriptor,
            output_type=list,
            is_collection=True,
            resolution_state=ResolutionState.RESOLVED,
        )
        for candidate in candidates:
            if not self._registry.is_active(candidate, self._profile):
                continue
            self._resolve_child(candidate, chain)
            aggregator.dependencies.append(candidate)

        logger.debug(
            "Aggregated %d candidate(s) of %s for %s.%s",
            len(aggregator.dependencies),
            key,
            node.name,
            spec.name,
        )
        return aggregator

    def _resolve_child(self, candidate: GraphNode, chain: List[GraphNode]) -> None:
        if not candidate.resolved:
            check_cycle(chain, candidate)
            self.resolve(candidate, chain)

    def _check_lazy(self, node: GraphNode, spec: InputSpec, selected: GraphNode) -> None:
        if spec.is_lazy and not selected.is_lazy:
            raise LazyDependencyError(f"lazy options needed {selected.name} for {node.name}")
        if not spec.is_lazy and selected.is_lazy:
            raise LazyDependencyError(f"lazy options need 'Lazy' to call {selected.name} from {node.name}")

    def _fallback(
        self,
        node: GraphNode,
        spec: InputSpec,
        option: Optional[WireOption],
        key: ProviderKey,
    ) -> GraphNode:
        if option is not None and option.has_default:
            value = option.default
            self._check_default(node, spec, value)
            if spec.is_lazy:
                return self._default_node(key, Lazy(lambda: value))
            return self._default_node(key, value)

        if spec.has_default:
            return self._default_node(key, spec.default)

        raise UnmetDependencyError(key, node.name)

    def _check_default(self, node: GraphNode, spec: InputSpec, value: Any) -> None:
        if value is None:
            matched = spec.is_optional
        elif spec.descriptor.is_collection:
            matched = isinstance(value, list) and all(satisfies(type(e), spec.element_type) for e in value)
        else:
            matched = satisfies(type(value), spec.element_type)

        if not matched:
            raise DefaultValueMismatchError(self._describe_default(value), spec.descriptor, node.name)

    @staticmethod
    def _describe_default(value: Any) -> Descriptor:
        try:
            descriptor, _ = parse_value(value)
        except DescriptorError:
            descriptor = describe_type(type(value))
        return descriptor

    @staticmethod
    def _default_node(key: ProviderKey, value: Any) -> GraphNode:
        return GraphNode(
            id=node_id(value),
            name=str(key),
            provided=value,
            output_type=type(value),
            resolution_state=ResolutionState.RESOLVED,
            instantiation_state=InstantiationState.INSTANTIATED,
        )
