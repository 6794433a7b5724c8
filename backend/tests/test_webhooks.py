"""
Tests for POST /api/webhooks.
"""

import pytest
from conftest import AUTH_HEADERS, CUSTOMER_ID


def _payload(**data):
    record = {"id": "lead-1", "name": "Jane Doe", "fields": {"industry": "Retail"}}
    record.update(data)
    return {
        "customerId": CUSTOMER_ID,
        "recordType": "get-leads",
        "integrationKey": "salesforce",
        "data": record,
    }


class TestWebhookUpsert:
    def test_creates_new_record(self, client, database):
        response = client.post("/api/webhooks", json=_payload())
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["status"] == "created"
        assert body["recordId"] == "lead-1"
        assert body["customerId"] == CUSTOMER_ID
        assert body["recordType"] == "get-leads"
        assert body["integrationKey"] == "salesforce"
        stored = database.records.find_one({"id": "lead-1"})
        assert str(stored["_id"]) == body["_id"]
        assert stored["name"] == "Jane Doe"
        assert "updatedTime" in stored

    def test_identical_payload_is_unchanged(self, client, database):
        first = client.post("/api/webhooks", json=_payload()).json()
        stored_before = database.records.find_one({"id": "lead-1"})
        second = client.post("/api/webhooks", json=_payload()).json()
        assert second["status"] == "unchanged"
        assert second["_id"] == first["_id"]
        assert database.records.find_one({"id": "lead-1"})["updatedAt"] == stored_before["updatedAt"]

    def test_changed_payload_is_updated(self, client, database):
        client.post("/api/webhooks", json=_payload())
        body = client.post("/api/webhooks", json=_payload(fields={"industry": "Finance"})).json()
        assert body["status"] == "updated"
        assert database.records.count_documents({"id": "lead-1"}) == 1
        assert database.records.find_one({"id": "lead-1"})["fields"] == {"industry": "Finance"}

    def test_same_id_other_record_type_is_separate(self, client, database):
        client.post("/api/webhooks", json=_payload())
        payload = _payload()
        payload["recordType"] = "get-contacts"
        body = client.post("/api/webhooks", json=payload).json()
        assert body["status"] == "created"
        assert database.records.count_documents({"id": "lead-1"}) == 2

    def test_integration_key_from_connection(self, client, database):
        payload = _payload()
        del payload["integrationKey"]
        payload["connection"] = {"id": "conn-hs", "integration": {"key": "hubspot"}}
        body = client.post("/api/webhooks", json=payload).json()
        assert body["integrationKey"] == "hubspot"
        assert database.records.find_one({"id": "lead-1"})["integrationKey"] == "hubspot"

    def test_numeric_id_is_stored_as_string(self, client, database):
        body = client.post("/api/webhooks", json=_payload(id=123)).json()
        assert body["recordId"] == "123"
        assert database.records.find_one({"id": "123"}) is not None


class TestWebhookValidation:
    def test_missing_customer(self, client):
        payload = _payload()
        del payload["customerId"]
        response = client.post("/api/webhooks", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}

    def test_missing_record_type(self, client):
        payload = _payload()
        del payload["recordType"]
        assert client.post("/api/webhooks", json=payload).status_code == 400

    def test_missing_record_id(self, client):
        payload = _payload()
        del payload["data"]["id"]
        assert client.post("/api/webhooks", json=payload).status_code == 400

    def test_missing_data(self, client):
        payload = _payload()
        del payload["data"]
        assert client.post("/api/webhooks", json=payload).status_code == 400

    def test_non_json_body(self, client):
        response = client.post(
            "/api/webhooks",
            content="not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"


class TestWebhookAfterImport:
    @pytest.fixture(autouse=True)
    def imported(self, client, integration_app):
        integration_app.action_pages = {
            None: {
                "records": [
                    {
                        "id": "lead-1",
                        "name": "Jane Doe",
                        "uri": "https://crm.example.test/lead-1",
                        "createdTime": "2024-01-01T00:00:00Z",
                        "fields": {"industry": "Retail"},
                    }
                ]
            }
        }
        response = client.get("/api/records/import", params={"action": "get-leads"}, headers=AUTH_HEADERS)
        assert response.json()["newRecordsCount"] == 1

    def test_payload_without_optional_fields_is_unchanged(self, client, database):
        statuses = [client.post("/api/webhooks", json=_payload()).json()["status"] for _ in range(2)]
        assert statuses == ["unchanged", "unchanged"]
        stored = database.records.find_one({"id": "lead-1"})
        assert stored["uri"] == "https://crm.example.test/lead-1"

    def test_payload_without_integration_key_is_unchanged(self, client):
        payload = _payload()
        del payload["integrationKey"]
        assert client.post("/api/webhooks", json=payload).json()["status"] == "unchanged"

    def test_changed_field_then_repeat(self, client, database):
        changed = _payload(fields={"industry": "Finance"})
        first = client.post("/api/webhooks", json=changed).json()
        second = client.post("/api/webhooks", json=changed).json()
        assert (first["status"], second["status"]) == ("updated", "unchanged")
        stored = database.records.find_one({"id": "lead-1"})
        assert stored["fields"] == {"industry": "Finance"}
        assert stored["uri"] == "https://crm.example.test/lead-1"
