"""Application layer - Startup and shutdown sequence."""

import logging
from typing import Optional

from graphwire.domain import (
    ApplicationStartError,
    IContainer,
    Initializer,
    StartListener,
    StopListener,
)

logger = logging.getLogger(__name__)


class ApplicationBootstrap:
    """Drives a container through application startup and shutdown.

    ``start()`` resolves the graph, then calls ``initialize(container)`` on
    every ``Initializer`` and ``on_app_start()`` on every ``StartListener``;
    ``stop()`` calls ``on_app_stop()`` on every ``StopListener``. Each group
    is visited in retrieval order, so ``Ordered`` values run first.

    Attributes:
        container: The container holding the registered providers.

    Example:
        >>> container = DIContainer(ContainerSettings(profile="prod"))
        >>> container.register_all(new_database, new_http_server)
        >>> with ApplicationBootstrap(container):
        ...     serve_forever()
    """

    def __init__(self, container: IContainer) -> None:
        self.container = container
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        """Resolve the graph and run the startup hooks.

        Raises:
            ApplicationStartError: If resolution or any hook fails.
        """
        if self._started:
            return

        try:
            self.container.resolve_all()
            for initializer in self.container.retrieve(Initializer):
                initializer.initialize(self.container)
            for listener in self.container.retrieve(StartListener):
                listener.on_app_start()
        except Exception as e:
            raise ApplicationStartError(e) from e

        self._started = True
        logger.info("Application started")

    def stop(self) -> None:
        """Run the shutdown hooks once, if the application started."""
        if not self._started:
            return

        self._started = False
        for listener in self.container.retrieve(StopListener):
            listener.on_app_stop()
        logger.info("Application stopped")

    def __enter__(self) -> "ApplicationBootstrap":
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> Optional[bool]:
        self.stop()
        return False
