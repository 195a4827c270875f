"""Integration tests for FastAPI integration across layers."""

from abc import ABC, abstractmethod
from typing import List

import pytest

pytest.importorskip("fastapi")

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from graphwire import ApplicationStartError, ContainerSettings, DIContainer, active, name_in, name_out
from graphwire.infrastructure.fastapi_integration import (
    container_lifespan,
    create_app_dependency,
    create_collection_dependency,
    create_fastapi_dependency,
)


class HealthCheck(ABC):
    @abstractmethod
    def check(self) -> str: ...


class DatabaseCheck(HealthCheck):
    def order(self) -> int:
        return 1

    def check(self) -> str:
        return "database"


class CacheCheck(HealthCheck):
    def check(self) -> str:
        return "cache"


class UserRepository:
    def __init__(self, dsn: str):
        self.dsn = dsn

    def get_all(self) -> List[str]:
        return ["ada", "grace"]


class UserService:
    def __init__(self, repo: UserRepository):
        self.repo = repo

    def list_users(self) -> List[str]:
        return self.repo.get_all()


class Server:
    def __init__(self):
        self.events = []

    def on_app_start(self) -> None:
        self.events.append("start")

    def on_app_stop(self) -> None:
        self.events.append("stop")


def build_container(profile: str = "") -> DIContainer:
    container = DIContainer(ContainerSettings(profile=profile))
    container.register("postgres://users", name_out("dsn"))
    container.register(UserRepository, name_in("dsn"))
    container.register(UserService)
    container.register(CacheCheck)
    container.register(DatabaseCheck, active("prod"))
    return container


class TestFastAPIIntegrationEndToEnd:
    """Test complete FastAPI integration scenarios."""

    def test_fastapi_app_with_dependency_injection(self):
        """Test serving requests from a container resolved up front."""
        container = build_container("prod")
        container.resolve_all()
        app = FastAPI()
        get_user_service = create_fastapi_dependency(container, UserService)

        @app.get("/users")
        def list_users(service: UserService = Depends(get_user_service)):
            return {"users": service.list_users(), "dsn": service.repo.dsn}

        client = TestClient(app)
        response = client.get("/users")

        assert response.status_code == 200
        assert response.json() == {"users": ["ada", "grace"], "dsn": "postgres://users"}

    def test_collection_dependency_in_priority_order(self):
        """Test that collection dependencies follow retrieval order."""
        container = build_container("prod")
        container.resolve_all()
        app = FastAPI()
        get_checks = create_collection_dependency(container, HealthCheck)

        @app.get("/health")
        def health(checks: List[HealthCheck] = Depends(get_checks)):
            return [check.check() for check in checks]

        response = TestClient(app).get("/health")

        assert response.json() == ["database", "cache"]

    def test_lifespan_with_app_dependency(self):
        """Test that container_lifespan exposes the container to app dependencies."""
        server = Server()
        container = build_container()
        container.register(server)
        app = FastAPI(lifespan=container_lifespan(container))
        get_user_service = create_app_dependency(UserService)

        @app.get("/users")
        def list_users(service: UserService = Depends(get_user_service)):
            return service.list_users()

        with TestClient(app) as client:
            assert server.events == ["start"]
            response = client.get("/users")
            assert response.json() == ["ada", "grace"]

        assert server.events == ["start", "stop"]

    def test_same_instance_across_requests(self):
        """Test that every request receives the same singleton."""
        container = build_container()
        app = FastAPI(lifespan=container_lifespan(container))
        get_user_service = create_app_dependency(UserService)

        @app.get("/identity")
        def identity(service: UserService = Depends(get_user_service)):
            return {"id": id(service)}

        with TestClient(app) as client:
            first = client.get("/identity").json()
            second = client.get("/identity").json()

        assert first == second

    def test_lifespan_fails_on_unresolvable_graph(self):
        """Test that the application refuses to start on a broken graph."""
        container = DIContainer()
        container.register(UserService)
        app = FastAPI(lifespan=container_lifespan(container))

        with pytest.raises(ApplicationStartError):
            with TestClient(app):
                pass
