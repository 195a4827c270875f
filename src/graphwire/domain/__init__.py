"""
Domain layer - Core models, capabilities and error taxonomy.

This layer describes providers, keys, wire options and graph nodes.
It has no dependencies on other layers.
"""

from .capabilities import (
    HIGHEST_ORDER,
    LOWEST_ORDER,
    Contract,
    Initializer,
    Ordered,
    StartListener,
    StopListener,
    is_interface,
    order_of,
    satisfies,
)
from .enums import InstantiationState, ResolutionState, WireDirection
from .exceptions import (
    AmbiguousDependencyError,
    ApplicationStartError,
    ConfigurationError,
    ContainerStateError,
    CycleError,
    DefaultValueMismatchError,
    DescriptorError,
    DIException,
    InstantiationError,
    LazyDependencyError,
    UnmetDependencyError,
)
from .interfaces import IContainer, IInstantiator, IResolver
from .models import (
    ContainerSettings,
    Descriptor,
    GraphNode,
    InputSpec,
    ProviderKey,
    Registration,
    Signature,
    WireOption,
)

# Rebuild Pydantic models to resolve the self-referencing dependency edges
GraphNode.model_rebuild()

__all__ = [
    # Enums
    "WireDirection",
    "ResolutionState",
    "InstantiationState",
    # Exceptions
    "DIException",
    "ConfigurationError",
    "DescriptorError",
    "UnmetDependencyError",
    "AmbiguousDependencyError",
    "DefaultValueMismatchError",
    "CycleError",
    "LazyDependencyError",
    "InstantiationError",
    "ContainerStateError",
    "ApplicationStartError",
    # Interfaces
    "IContainer",
    "IResolver",
    "IInstantiator",
    # Models
    "Descriptor",
    "InputSpec",
    "Signature",
    "ProviderKey",
    "Registration",
    "WireOption",
    "GraphNode",
    "ContainerSettings",
    # Capabilities
    "Contract",
    "Ordered",
    "Initializer",
    "StartListener",
    "StopListener",
    "HIGHEST_ORDER",
    "LOWEST_ORDER",
    "order_of",
    "is_interface",
    "satisfies",
]
