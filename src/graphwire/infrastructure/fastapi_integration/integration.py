from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, List, Type, TypeVar

from fastapi import FastAPI, Request

from graphwire.application import ApplicationBootstrap
from graphwire.domain import IContainer

T = TypeVar("T")


def create_fastapi_dependency(container: IContainer, contract: Type[T]) -> Callable[[], T]:
    """Create a FastAPI Depends() callable that retrieves from the DI container.

    The callable returns the highest-priority instance satisfying the
    contract. The container must have been resolved, typically by
    ``container_lifespan``.

    Args:
        container: The DI container to retrieve from.
        contract: The type to retrieve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> get_user_repo = create_fastapi_dependency(container, UserRepository)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_user_repo)):
        ...     return await repo.get_all()
    """

    def dependency() -> T:
        """Retrieve the dependency from the container."""
        return container.retrieve_one(contract)

    return dependency


def create_collection_dependency(container: IContainer, contract: Type[T]) -> Callable[[], List[T]]:
    """Create a FastAPI Depends() callable returning every instance of a contract.

    Args:
        container: The DI container to retrieve from.
        contract: The type to retrieve.

    Returns:
        A callable returning the priority-ordered instances.

    Example:
        >>> get_health_checks = create_collection_dependency(container, HealthCheck)
        >>>
        >>> @app.get("/health")
        >>> def health(checks: List[HealthCheck] = Depends(get_health_checks)):
        ...     return {check.name: check.run() for check in checks}
    """

    def dependency() -> List[T]:
        """Retrieve every matching instance from the container."""
        return container.retrieve(contract)

    return dependency


def create_app_dependency(contract: Type[T]) -> Callable[[Request], T]:
    """Create a FastAPI dependency that retrieves from the application's container.

    Requires the application to be created with ``container_lifespan``,
    which stores the container on ``app.state.di_container``.

    Args:
        contract: The type to retrieve.

    Returns:
        A callable that retrieves from the request's application container.
    """

    def app_dependency(request: Request) -> T:
        """Retrieve from the application's container."""
        container = getattr(request.app.state, "di_container", None)
        if container is None:
            raise RuntimeError(
                "Application does not have a DI container. Did you forget to use container_lifespan?"
            )
        return container.retrieve_one(contract)

    return app_dependency


def container_lifespan(container: IContainer) -> Callable[[FastAPI], Any]:
    """Build a FastAPI lifespan that starts and stops the application graph.

    On startup the container is resolved and startup hooks run; the
    container is exposed on ``app.state.di_container``. On shutdown the
    stop hooks run.

    Args:
        container: The DI container holding the registered providers.

    Returns:
        A lifespan function for ``FastAPI(lifespan=...)``.

    Example:
        >>> container = DIContainer()
        >>> container.register_all(new_database, new_user_repository)
        >>> app = FastAPI(lifespan=container_lifespan(container))
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        bootstrap = ApplicationBootstrap(container)
        bootstrap.start()
        app.state.di_container = container
        try:
            yield
        finally:
            bootstrap.stop()

    return lifespan
