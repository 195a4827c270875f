"""
graphwire: Startup-time dependency graph resolution with qualifiers, profiles and lazy wiring.

Public API exports for the graphwire package.
"""

# Application exports
from graphwire.application.bootstrap import ApplicationBootstrap
from graphwire.application.container import DIContainer
from graphwire.application.lazy import Lazy
from graphwire.application.wire_options import (
    active,
    default,
    lazy_out,
    name_in,
    name_out,
    primary,
    wire_in,
    wire_out,
)

# Domain exports
from graphwire.domain.capabilities import (
    HIGHEST_ORDER,
    LOWEST_ORDER,
    Contract,
    Initializer,
    Ordered,
    StartListener,
    StopListener,
)
from graphwire.domain.exceptions import (
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
from graphwire.domain.models import ContainerSettings, WireOption

__version__ = "0.1.0"

__all__ = [
    # Container
    "DIContainer",
    "ContainerSettings",
    "ApplicationBootstrap",
    "Lazy",
    # Wire options
    "WireOption",
    "wire_in",
    "wire_out",
    "name_in",
    "name_out",
    "default",
    "primary",
    "active",
    "lazy_out",
    # Capabilities
    "Contract",
    "Ordered",
    "Initializer",
    "StartListener",
    "StopListener",
    "HIGHEST_ORDER",
    "LOWEST_ORDER",
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
]
