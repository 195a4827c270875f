"""
FastAPI integration module.

Provides helpers and utilities for integrating graphwire with FastAPI.
"""

from .integration import (
    container_lifespan,
    create_app_dependency,
    create_collection_dependency,
    create_fastapi_dependency,
)

__all__ = [
    "create_fastapi_dependency",
    "create_collection_dependency",
    "create_app_dependency",
    "container_lifespan",
]
