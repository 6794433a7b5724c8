"""
Integration.app REST client: connections, actions, action instances and data sources.
Uses a customer-scoped Bearer token, requests library and error mapping.
"""

import logging
from typing import Any

import requests
from fastapi import Depends

from app.core.config import get_settings
from app.core.security import AuthContext, create_access_token, get_current_auth

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SEC = 30


class IntegrationAppServiceError(Exception):
    """Raised when an Integration.app API call fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


def extract_records(result: Any) -> list[dict[str, Any]]:
    """Records from an action or data source response: output.records, records, or a bare list."""
    if isinstance(result, list):
        return [r for r in result if isinstance(r, dict)]
    if not isinstance(result, dict):
        return []
    output = result.get("output")
    if isinstance(output, dict) and isinstance(output.get("records"), list):
        return [r for r in output["records"] if isinstance(r, dict)]
    if isinstance(result.get("records"), list):
        return [r for r in result["records"] if isinstance(r, dict)]
    if isinstance(output, list):
        return [r for r in output if isinstance(r, dict)]
    logger.info("Unexpected result structure: %s", sorted(result.keys()))
    return []


def extract_cursor(result: Any) -> str | None:
    """Next-page cursor from output.cursor or cursor; None when exhausted."""
    if not isinstance(result, dict):
        return None
    output = result.get("output")
    cursor = output.get("cursor") if isinstance(output, dict) else None
    cursor = cursor or result.get("cursor")
    return str(cursor) if cursor else None


class IntegrationAppService:
    """
    Integration.app API client for one customer. No retries: failures surface
    to the caller as IntegrationAppServiceError.
    """

    def __init__(self, auth: AuthContext, access_token: str | None = None) -> None:
        settings = get_settings()
        self._auth = auth
        self._token = access_token
        self._base_url = settings.integration_app_api_url
        self._has_secret = bool(settings.integration_app_workspace_secret)

    def _get_headers(self) -> dict[str, str]:
        """Build request headers with Bearer token."""
        if self._token is None:
            if not self._has_secret:
                raise IntegrationAppServiceError(
                    "Integration.app workspace not configured. "
                    "Set INTEGRATION_APP_WORKSPACE_KEY and INTEGRATION_APP_WORKSPACE_SECRET."
                )
            self._token = create_access_token(self._auth)
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    def _handle_error(self, response: requests.Response) -> None:
        """Interpret error response and raise IntegrationAppServiceError with detail."""
        try:
            body = response.json()
        except ValueError:
            body = response.text or None
        msg = f"Integration.app API error: {response.status_code}"
        if isinstance(body, dict):
            detail = body.get("message") or body.get("error") or body
            if body.get("type"):
                msg += f" ({body['type']})"
            if isinstance(detail, str):
                msg += f" - {detail}"
        elif isinstance(body, str) and body:
            msg += f" - {body[:500]}"
        raise IntegrationAppServiceError(msg, status_code=response.status_code, detail=body)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | list[Any] | None = None,
    ) -> Any:
        """
        Execute one HTTP request.
        path: e.g. /connections (no leading slash required).
        """
        url = f"{self._base_url.rstrip('/')}/{path.lstrip('/')}"
        headers = self._get_headers()
        try:
            resp = requests.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json,
                timeout=REQUEST_TIMEOUT_SEC,
            )
        except requests.RequestException as e:
            logger.warning("Integration.app %s %s failed: %s", method, path, e)
            raise IntegrationAppServiceError(f"Integration.app request failed: {e!s}") from e

        if resp.ok:
            if resp.status_code == 204 or not resp.content:
                return {}
            return resp.json()
        self._handle_error(resp)

    # -------------------------------------------------------------------------
    # Connections
    # -------------------------------------------------------------------------

    def list_connections(self) -> list[dict[str, Any]]:
        """Connections of the current customer."""
        data = self._request("GET", "/connections")
        if isinstance(data, list):
            return data
        return (data or {}).get("items") or []

    def find_connection(self, integration_key: str | None = None) -> dict[str, Any] | None:
        """Connection for integration_key if found, otherwise the first available one."""
        connections = self.list_connections()
        logger.info(
            "Available connections: %s",
            [(c.get("integration") or {}).get("key") for c in connections],
        )
        if integration_key:
            for conn in connections:
                if (conn.get("integration") or {}).get("key") == integration_key:
                    return conn
        return connections[0] if connections else None

    def archive_connection(self, connection_id: str) -> None:
        """Archive (disconnect) a connection."""
        self._request("DELETE", f"/connections/{connection_id}")

    # -------------------------------------------------------------------------
    # Actions and data sources
    # -------------------------------------------------------------------------

    def run_action(
        self,
        connection_id: str,
        action_key: str,
        payload: dict[str, Any] | None = None,
        instance_key: str | None = None,
    ) -> Any:
        """Run an action on a connection. Returns the raw response (shape varies by action)."""
        params = {"instanceKey": instance_key} if instance_key else None
        return self._request(
            "POST",
            f"/connections/{connection_id}/actions/{action_key}/run",
            params=params,
            json=payload or {},
        )

    def list_data_source_records(
        self,
        connection_id: str,
        data_source_key: str,
        cursor: str | None = None,
    ) -> Any:
        """List one page of records from a data source on a connection."""
        body: dict[str, Any] = {}
        if cursor:
            body["cursor"] = cursor
        return self._request(
            "POST",
            f"/connections/{connection_id}/data-sources/{data_source_key}/list-records",
            json=body,
        )

    def list_actions(self, integration_id: str) -> list[dict[str, Any]]:
        """Actions defined for an integration."""
        data = self._request("GET", "/actions", params={"integrationId": integration_id})
        if isinstance(data, list):
            return data
        return (data or {}).get("items") or []

    def get_action_instance(
        self,
        connection_id: str,
        action_key: str,
        auto_create: bool = True,
    ) -> dict[str, Any]:
        """Fetch the action instance for a connection, creating it when auto_create is set."""
        params = {"autoCreate": "true"} if auto_create else None
        data = self._request(
            "GET",
            f"/connections/{connection_id}/actions/{action_key}",
            params=params,
        )
        if not isinstance(data, dict):
            raise IntegrationAppServiceError(f"Unexpected response for action instance {action_key}")
        return data

    # -------------------------------------------------------------------------
    # Integrations
    # -------------------------------------------------------------------------

    def list_integrations(self) -> list[dict[str, Any]]:
        """Integrations available to the customer, each with its connection if any."""
        data = self._request("GET", "/integrations")
        if isinstance(data, list):
            return data
        return (data or {}).get("items") or []

    def find_integration(self, integration_key: str) -> dict[str, Any] | None:
        for integration in self.list_integrations():
            if integration.get("key") == integration_key:
                return integration
        return None


def get_integration_app_service(auth: AuthContext = Depends(get_current_auth)) -> IntegrationAppService:
    """Dependency: return an IntegrationAppService for the current customer."""
    return IntegrationAppService(auth)
