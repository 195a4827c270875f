"""Application layer - Provider registration table."""

import functools
import hashlib
import inspect
import logging
from typing import Any, Dict, List, Optional

from graphwire.application.descriptor_parser import display_name, parse_factory, parse_value
from graphwire.application.wire_options import split_options, validate_wire_options
from graphwire.domain import (
    ConfigurationError,
    GraphNode,
    InstantiationState,
    ProviderKey,
    Registration,
    ResolutionState,
    WireOption,
)
from graphwire.domain.capabilities import order_of

logger = logging.getLogger(__name__)


def node_id(provider: Any) -> str:
    """Derive a stable node identity from the provider object's address."""
    return hashlib.md5(str(id(provider)).encode()).hexdigest()


class ProviderRegistry:
    """Table of provider candidates keyed by ``ProviderKey``.

    Re-registering under an existing key never overwrites: every candidate
    is kept in insertion order and disambiguated at resolution time.

    Attributes:
        _providers: Candidate nodes per key, in registration order.
        _nodes: Every registered node, in registration order.
        _registrations: Replayable log of ``register`` calls.
    """

    def __init__(self) -> None:
        """Initialize an empty registration table."""
        self._providers: Dict[ProviderKey, List[GraphNode]] = {}
        self._nodes: List[GraphNode] = []
        self._registrations: List[Registration] = []

    def register(self, provider: Any, *options: WireOption, contract: Optional[Any] = None) -> GraphNode:
        """Insert a factory or pre-built instance into the table.

        Functions, methods and classes are factories; any other object,
        including a callable instance, is a pre-built instance.
        ``functools.partial`` objects are rejected: wrap them in a named,
        annotated function instead.

        Args:
            provider: The factory or instance.
            *options: Wire options; at most one output option, and it must be last.
            contract: Explicit output annotation overriding inference.

        Returns:
            The node created for the provider.

        Raises:
            ConfigurationError: If the registration is malformed.
        """
        if provider is None:
            raise ConfigurationError("pre process provider error: cannot be None")
        if isinstance(provider, WireOption):
            raise ConfigurationError("provider cannot be wire option")
        if isinstance(provider, functools.partial):
            raise ConfigurationError(
                "partial objects cannot be providers, use an annotated function",
                display_name(provider.func),
            )

        if inspect.isroutine(provider) or inspect.isclass(provider):
            node = self._build_factory_node(provider, list(options), contract)
        else:
            node = self._build_instance_node(provider, list(options), contract)

        key = self.key_of(node)
        node.registration_index = len(self._nodes)
        self._providers.setdefault(key, []).append(node)
        self._nodes.append(node)
        self._registrations.append(Registration(provider=provider, options=tuple(options), contract=contract))
        logger.debug("Registered %s under %s", node.name, key)
        return node

    def _build_factory_node(self, provider: Any, options: List[WireOption], contract: Optional[Any]) -> GraphNode:
        signature = parse_factory(provider, contract)
        name = display_name(provider)
        validate_wire_options(len(signature.inputs), name, options)
        input_options, output_option = split_options(options)

        return GraphNode(
            id=node_id(provider),
            name=name,
            factory=provider,
            signature=signature,
            descriptor=signature.output,
            output_type=signature.output_type,
            input_options=input_options,
            output_option=output_option,
        )

    def _build_instance_node(self, provider: Any, options: List[WireOption], contract: Optional[Any]) -> GraphNode:
        name = display_name(provider)
        if len(options) > 1 or (len(options) == 1 and (not options[0].is_out or options[0].check() is not None)):
            raise ConfigurationError("only one wire out option can be passed to a pre-built provider", name)

        output_option = options[0] if options else None
        if output_option is not None and output_option.lazy:
            raise ConfigurationError("pre-built provider cannot be lazy", name)

        descriptor, output_type = parse_value(provider, contract)
        if not descriptor.is_reference and (output_option is None or not output_option.name):
            raise ConfigurationError("primitive type should be provided with a 'name_out' option", name)

        return GraphNode(
            id=node_id(provider),
            name=name,
            provided=provider,
            descriptor=descriptor,
            output_type=output_type,
            output_option=output_option,
            resolution_state=ResolutionState.RESOLVED,
            instantiation_state=InstantiationState.INSTANTIATED,
            order=order_of(provider),
        )

    @staticmethod
    def key_of(node: GraphNode) -> ProviderKey:
        qualifier = node.output_option.name if node.output_option else ""
        return ProviderKey.of(node.descriptor, qualifier)

    def candidates(self, key: ProviderKey) -> List[GraphNode]:
        """Return every node registered under a key, in registration order."""
        return list(self._providers.get(key, []))

    def remove(self, key: ProviderKey) -> List[GraphNode]:
        """Drop every candidate registered under a key.

        Args:
            key: The key to clear.

        Returns:
            The removed nodes.
        """
        removed = self._providers.pop(key, [])
        removed_providers = [node.factory if node.is_factory else node.provided for node in removed]
        self._nodes = [node for node in self._nodes if all(node is not r for r in removed)]
        self._registrations = [
            registration
            for registration in self._registrations
            if all(registration.provider is not provider for provider in removed_providers)
        ]
        if removed:
            logger.debug("Removed %d candidate(s) under %s", len(removed), key)
        return removed

    @staticmethod
    def is_active(node: GraphNode, profile: str) -> bool:
        """Whether a node is active in a profile; nodes without profiles always are."""
        return not node.profiles or profile in node.profiles

    @property
    def nodes(self) -> List[GraphNode]:
        return list(self._nodes)

    @property
    def factory_nodes(self) -> List[GraphNode]:
        return [node for node in self._nodes if node.is_factory]

    @property
    def registrations(self) -> List[Registration]:
        return list(self._registrations)
