"""
Shared fixtures: an in-memory MongoDB (mongomock) and a fake Integration.app
service wired into the FastAPI app through dependency overrides.
"""

from typing import Any

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.core.database import Database, get_database
from app.core.security import AuthContext
from app.main import app
from app.services.integration_app_service import (
    IntegrationAppService,
    IntegrationAppServiceError,
    get_integration_app_service,
)

CUSTOMER_ID = "customer-1"
AUTH_HEADERS = {"x-auth-id": CUSTOMER_ID, "x-customer-name": "Acme Corp"}


class FakeIntegrationApp(IntegrationAppService):
    """
    IntegrationAppService with the HTTP calls replaced by in-memory data.
    Pages are keyed by the cursor they answer (None for the first page).
    """

    def __init__(self) -> None:
        super().__init__(AuthContext(customer_id=CUSTOMER_ID), access_token="test-token")
        self.connections: list[dict[str, Any]] = [
            {"id": "conn-sf", "integration": {"key": "salesforce"}},
            {"id": "conn-hs", "integration": {"key": "hubspot"}},
        ]
        self.action_pages: dict[str | None, Any] = {}
        self.data_source_pages: dict[str | None, Any] = {}
        self.action_error: IntegrationAppServiceError | None = None
        self.data_source_error: IntegrationAppServiceError | None = None
        self.integrations: list[dict[str, Any]] = []
        self.actions: dict[str, list[dict[str, Any]]] = {}
        self.failing_instances: set[str] = set()
        self.instances: list[tuple[str, str]] = []
        self.archived: list[str] = []
        self.calls: list[tuple[str, Any]] = []

    def list_connections(self) -> list[dict[str, Any]]:
        return self.connections

    def run_action(self, connection_id, action_key, payload=None, instance_key=None):
        cursor = (payload or {}).get("cursor")
        self.calls.append(("action", (connection_id, action_key, instance_key, cursor)))
        if self.action_error is not None:
            raise self.action_error
        return self.action_pages.get(cursor, {"output": {"records": []}})

    def list_data_source_records(self, connection_id, data_source_key, cursor=None):
        self.calls.append(("data_source", (connection_id, data_source_key, cursor)))
        if self.data_source_error is not None:
            raise self.data_source_error
        return self.data_source_pages.get(cursor, {"records": []})

    def list_integrations(self) -> list[dict[str, Any]]:
        return self.integrations

    def list_actions(self, integration_id: str) -> list[dict[str, Any]]:
        return self.actions.get(integration_id, [])

    def get_action_instance(self, connection_id, action_key, auto_create=True):
        if action_key in self.failing_instances:
            raise IntegrationAppServiceError(f"Integration.app API error: 500 - {action_key} failed")
        self.instances.append((connection_id, action_key))
        return {"id": f"inst-{action_key}", "key": action_key}

    def archive_connection(self, connection_id: str) -> None:
        self.archived.append(connection_id)


def make_records(start: int, count: int, **extra: Any) -> list[dict[str, Any]]:
    return [
        {"id": f"rec-{i}", "name": f"Record {i}", "fields": {"industry": "Technology"}, **extra}
        for i in range(start, start + count)
    ]


@pytest.fixture
def database() -> Database:
    return Database("mongodb://localhost:27017/test", "test", client=mongomock.MongoClient())


@pytest.fixture
def integration_app() -> FakeIntegrationApp:
    return FakeIntegrationApp()


@pytest.fixture
def client(database, integration_app):
    """Test client for the app with the database and Integration.app overridden."""
    app.dependency_overrides[get_database] = lambda: database
    app.dependency_overrides[get_integration_app_service] = lambda: integration_app
    yield TestClient(app)
    app.dependency_overrides.clear()
