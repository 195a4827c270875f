"""
Application layer - Use cases and orchestration.

This layer registers providers, resolves the dependency graph and builds
instances. It depends only on the Domain layer.
"""

from .bootstrap import ApplicationBootstrap
from .circular_detector import check_cycle
from .container import DIContainer
from .instantiator import Instantiator
from .lazy import Lazy
from .registry import ProviderRegistry
from .resolver import DependencyResolver
from .wire_options import (
    active,
    default,
    lazy_out,
    name_in,
    name_out,
    primary,
    validate_wire_options,
    wire_in,
    wire_out,
)

__all__ = [
    "DIContainer",
    "ApplicationBootstrap",
    "DependencyResolver",
    "Instantiator",
    "ProviderRegistry",
    "Lazy",
    "check_cycle",
    # Wire options
    "wire_in",
    "wire_out",
    "name_in",
    "name_out",
    "default",
    "primary",
    "active",
    "lazy_out",
    "validate_wire_options",
]
