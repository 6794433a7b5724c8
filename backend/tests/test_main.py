"""
Tests for the service index, health check and error wire format.
"""

from conftest import AUTH_HEADERS


class TestApp:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_index_lists_endpoints(self, client):
        body = client.get("/").json()
        assert body["endpoints"]["records"] == "/api/records"
        assert body["endpoints"]["webhooks"] == "/api/webhooks"

    def test_unknown_route(self, client):
        assert client.get("/api/unknown", headers=AUTH_HEADERS).status_code == 404

    def test_request_validation_error_shape(self, client):
        response = client.post("/api/forms", content="{", headers={**AUTH_HEADERS, "Content-Type": "application/json"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request"
        assert isinstance(body["details"], list)

    def test_error_body_is_documented(self, client):
        paths = client.get("/openapi.json").json()["paths"]
        ref = "#/components/schemas/ErrorResponse"
        for path, method, code in [
            ("/api/records/import", "get", "500"),
            ("/api/webhooks", "post", "400"),
            ("/api/schema/{record_type}/{user_id}", "delete", "404"),
            ("/api/integrations/{integration_key}/sync-actions", "post", "502"),
        ]:
            content = paths[path][method]["responses"][code]["content"]
            assert content["application/json"]["schema"]["$ref"] == ref
