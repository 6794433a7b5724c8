"""
Tests for /api/integrations.
"""

import pytest
from conftest import AUTH_HEADERS

from app.services.integration_app_service import IntegrationAppServiceError


@pytest.fixture
def integrations(integration_app):
    integration_app.integrations = [
        {
            "id": "int-sf",
            "key": "salesforce",
            "name": "Salesforce",
            "logoUri": "https://example.com/sf.png",
            "connection": {"id": "conn-sf"},
        },
        {"id": "int-hs", "key": "hubspot", "name": "HubSpot"},
    ]
    integration_app.actions = {
        "int-sf": [{"id": "a1", "key": "get-leads", "name": "Get leads"}, {"id": "a2", "key": "get-objects"}],
        "int-hs": [{"id": "a3", "key": "get-contacts"}],
    }
    return integration_app


class TestListIntegrations:
    def test_summaries(self, client, integrations):
        response = client.get("/api/integrations", headers=AUTH_HEADERS)
        assert response.status_code == 200
        assert response.json()["integrations"] == [
            {
                "id": "int-sf",
                "key": "salesforce",
                "name": "Salesforce",
                "logoUri": "https://example.com/sf.png",
                "connected": True,
                "connectionId": "conn-sf",
            },
            {
                "id": "int-hs",
                "key": "hubspot",
                "name": "HubSpot",
                "logoUri": None,
                "connected": False,
                "connectionId": None,
            },
        ]

    def test_requires_customer(self, client, integrations):
        assert client.get("/api/integrations").status_code == 401

    def test_actions(self, client, integrations):
        response = client.get("/api/integrations/salesforce/actions", headers=AUTH_HEADERS)
        assert response.status_code == 200
        assert [a["key"] for a in response.json()["actions"]] == ["get-leads", "get-objects"]

    def test_actions_unknown_integration(self, client, integrations):
        response = client.get("/api/integrations/pipedrive/actions", headers=AUTH_HEADERS)
        assert response.status_code == 404
        assert response.json() == {"error": "Integration not found: pipedrive"}


class TestSyncActions:
    def test_creates_every_instance(self, client, integrations):
        response = client.post("/api/integrations/salesforce/sync-actions", headers=AUTH_HEADERS)
        assert response.status_code == 200
        assert response.json() == {
            "integrationKey": "salesforce",
            "actionsCount": 2,
            "created": ["get-leads", "get-objects"],
            "failed": [],
        }
        assert integrations.instances == [("conn-sf", "get-leads"), ("conn-sf", "get-objects")]

    def test_failure_does_not_stop_others(self, client, integrations):
        integrations.failing_instances = {"get-leads"}
        body = client.post("/api/integrations/salesforce/sync-actions", headers=AUTH_HEADERS).json()
        assert body["created"] == ["get-objects"]
        assert body["failed"] == [
            {"key": "get-leads", "error": "Integration.app API error: 500 - get-leads failed"}
        ]

    def test_not_connected(self, client, integrations):
        response = client.post("/api/integrations/hubspot/sync-actions", headers=AUTH_HEADERS)
        assert response.status_code == 400
        assert response.json() == {"error": "No connection found for integration: hubspot"}

    def test_unknown_integration(self, client, integrations):
        response = client.post("/api/integrations/pipedrive/sync-actions", headers=AUTH_HEADERS)
        assert response.status_code == 404


class TestDisconnect:
    def test_archives_connection(self, client, integrations):
        response = client.delete("/api/integrations/salesforce/connection", headers=AUTH_HEADERS)
        assert response.status_code == 200
        assert response.json() == {"message": "Disconnected salesforce"}
        assert integrations.archived == ["conn-sf"]

    def test_not_connected(self, client, integrations):
        response = client.delete("/api/integrations/hubspot/connection", headers=AUTH_HEADERS)
        assert response.status_code == 400
        assert integrations.archived == []

    def test_upstream_error(self, client, integrations, monkeypatch):
        def fail(connection_id):
            raise IntegrationAppServiceError("Integration.app API error: 503", status_code=503)

        monkeypatch.setattr(integrations, "archive_connection", fail)
        response = client.delete("/api/integrations/salesforce/connection", headers=AUTH_HEADERS)
        assert response.status_code == 502
        assert response.json() == {"error": "Integration.app API error: 503"}
