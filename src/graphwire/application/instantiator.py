import logging
import threading
from typing import Any, Dict, List, Tuple

from graphwire.application.lazy import Lazy
from graphwire.domain import (
    ContainerStateError,
    DIException,
    GraphNode,
    IInstantiator,
    InstantiationError,
    InstantiationState,
    order_of,
)

logger = logging.getLogger(__name__)


class Instantiator(IInstantiator):
    """Builds node values in dependency order.

    Every node is built at most once. Nodes registered with ``lazy_out()``
    defer their whole construction, dependencies included, behind a
    ``Lazy`` handle that runs on first call.

    Attributes:
        _lock: Re-entrant construction lock, shared with every lazy handle.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def instantiate(self, node: GraphNode) -> None:
        """Build a node's value after every one of its dependency edges.

        Args:
            node: A resolved node. No-op if already instantiated.

        Raises:
            ContainerStateError: If the node has not been resolved.
            InstantiationError: If a factory raises.
        """
        if node.instantiated:
            return
        if not node.resolved:
            raise ContainerStateError(f"cannot instantiate unresolved node {node.name}")

        with self._lock:
            if node.instantiated:
                return
            if node.is_lazy:
                node.provided = Lazy(lambda: self._build(node), lock=self._lock)
                node.instantiation_state = InstantiationState.INSTANTIATED
                return

            value = self._build(node)
            # Aggregators carry no value beyond their members
            if not node.is_collection:
                node.provided = value
                node.order = order_of(value)
            node.instantiation_state = InstantiationState.INSTANTIATED

    def value_of(self, node: GraphNode) -> Any:
        """Return a node's value, building it if needed.

        Lazy nodes are evaluated through their handle.

        Args:
            node: A resolved, non-aggregator node.

        Returns:
            The produced value.
        """
        self.instantiate(node)
        if not node.is_lazy:
            return node.provided

        value = node.provided()
        if node.order is None:
            node.order = order_of(value)
        return value

    def _build(self, node: GraphNode) -> Any:
        for dependency in node.dependencies:
            self.instantiate(dependency)

        if node.is_collection:
            return None

        args, kwargs = self._assemble(node)
        return self._invoke(node, args, kwargs)

    def _assemble(self, node: GraphNode) -> Tuple[List[Any], Dict[str, Any]]:
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for spec, dependency in zip(node.signature.inputs, node.dependencies):
            value = self._collect(dependency) if dependency.is_collection else dependency.provided
            if spec.keyword_only:
                kwargs[spec.name] = value
            else:
                args.append(value)
        return args, kwargs

    def _collect(self, aggregator: GraphNode) -> List[Any]:
        values: List[Any] = []
        for member in aggregator.dependencies:
            value = self.value_of(member)
            if member.descriptor is not None and member.descriptor.is_collection:
                values.extend(value)
            else:
                values.append(value)
        return values

    @staticmethod
    def _invoke(node: GraphNode, args: List[Any], kwargs: Dict[str, Any]) -> Any:
        try:
            value = node.factory(*args, **kwargs)
        except DIException:
            raise
        except Exception as e:
            raise InstantiationError(node.name, str(e)) from e
        logger.debug("Instantiated %s", node.name)
        return value
