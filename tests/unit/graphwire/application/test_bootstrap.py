"""Unit tests for ApplicationBootstrap."""

import pytest

from graphwire.application.bootstrap import ApplicationBootstrap
from graphwire.application.container import DIContainer
from graphwire.domain import ApplicationStartError, IContainer, UnmetDependencyError

events = []


class Migrations:
    def __init__(self):
        self.container = None

    def initialize(self, container: IContainer) -> None:
        self.container = container
        events.append("migrate")


class Scheduler:
    def on_app_start(self) -> None:
        events.append("scheduler started")

    def on_app_stop(self) -> None:
        events.append("scheduler stopped")


class HttpServer:
    def order(self) -> int:
        return 1

    def on_app_start(self) -> None:
        events.append("http started")

    def on_app_stop(self) -> None:
        events.append("http stopped")


class BrokenListener:
    def on_app_start(self) -> None:
        raise RuntimeError("port in use")


class Repository:
    def __init__(self, scheduler: Scheduler):
        self.scheduler = scheduler


@pytest.fixture(autouse=True)
def reset_events():
    events.clear()
    yield
    events.clear()


class TestStart:
    """Test cases for ApplicationBootstrap.start."""

    def test_start_resolves_container(self):
        """Test that starting resolves the graph."""
        container = DIContainer()
        container.register(Scheduler)
        bootstrap = ApplicationBootstrap(container)

        bootstrap.start()

        assert container.is_resolved is True
        assert bootstrap.started is True

    def test_initializers_run_before_start_listeners(self):
        """Test the hook order: initializers, then start listeners by priority."""
        container = DIContainer()
        container.register_all(Scheduler, HttpServer, Migrations)

        ApplicationBootstrap(container).start()

        assert events == ["migrate", "http started", "scheduler started"]

    def test_initializer_receives_container(self):
        """Test that initializers get the container passed in."""
        container = DIContainer()
        container.register(Migrations)

        ApplicationBootstrap(container).start()

        assert container.retrieve_one(Migrations).container is container

    def test_start_runs_once(self):
        """Test that a second start() is a no-op."""
        container = DIContainer()
        container.register(Scheduler)
        bootstrap = ApplicationBootstrap(container)

        bootstrap.start()
        bootstrap.start()

        assert events == ["scheduler started"]

    def test_resolution_failure_is_wrapped(self):
        """Test that a resolution error aborts startup with ApplicationStartError."""
        container = DIContainer()
        container.register(Repository)
        bootstrap = ApplicationBootstrap(container)

        with pytest.raises(ApplicationStartError) as exc_info:
            bootstrap.start()

        assert isinstance(exc_info.value.cause, UnmetDependencyError)
        assert bootstrap.started is False

    def test_hook_failure_is_wrapped(self):
        """Test that a failing start listener aborts startup."""
        container = DIContainer()
        container.register(BrokenListener)

        with pytest.raises(ApplicationStartError, match="port in use"):
            ApplicationBootstrap(container).start()


class TestStop:
    """Test cases for ApplicationBootstrap.stop."""

    def test_stop_notifies_listeners(self):
        """Test that stop() notifies stop listeners by priority."""
        container = DIContainer()
        container.register_all(Scheduler, HttpServer)
        bootstrap = ApplicationBootstrap(container)
        bootstrap.start()
        events.clear()

        bootstrap.stop()

        assert events == ["http stopped", "scheduler stopped"]
        assert bootstrap.started is False

    def test_stop_without_start(self):
        """Test that stop() before start() does nothing."""
        container = DIContainer()
        container.register(Scheduler)

        ApplicationBootstrap(container).stop()

        assert events == []

    def test_stop_runs_once(self):
        """Test that a second stop() is a no-op."""
        container = DIContainer()
        container.register(Scheduler)
        bootstrap = ApplicationBootstrap(container)
        bootstrap.start()

        bootstrap.stop()
        bootstrap.stop()

        assert events.count("scheduler stopped") == 1


class TestContextManager:
    """Test cases for the context manager protocol."""

    def test_with_block_starts_and_stops(self):
        """Test that the with block wraps start() and stop()."""
        container = DIContainer()
        container.register(Scheduler)

        with ApplicationBootstrap(container) as bootstrap:
            assert bootstrap.started is True

        assert events == ["scheduler started", "scheduler stopped"]

    def test_stop_runs_on_error(self):
        """Test that stop() runs when the block raises."""
        container = DIContainer()
        container.register(Scheduler)

        with pytest.raises(KeyError):
            with ApplicationBootstrap(container):
                raise KeyError("boom")

        assert events[-1] == "scheduler stopped"
