"""Application layer - Circular dependency detection."""

from typing import List

from graphwire.domain import CycleError, GraphNode


def check_cycle(chain: List[GraphNode], candidate: GraphNode) -> None:
    """Fail when a candidate already appears on the active resolution chain.

    Args:
        chain: Nodes being resolved, from the outermost dependent inwards.
        candidate: The node about to be resolved.

    Raises:
        CycleError: If the candidate is on the chain. The reported chain is
            the full active chain followed by the candidate.

    Example:
        >>> check_cycle([node_a, node_b, node_c], node_a)  # Raises CycleError
    """
    if any(node is candidate for node in chain):
        raise CycleError([node.name for node in chain] + [candidate.name])
