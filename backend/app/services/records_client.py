"""
Client for the records API, doing what the web app's records view does:
build the list/import URLs, follow cursors, and trigger imports.

Works with a requests.Session or any client exposing the same get() call
(for example FastAPI's TestClient).
"""

import logging
from typing import Any, Iterator

import requests

from app.core.constants import form_id_from_action, is_custom_form_action

logger = logging.getLogger(__name__)


class RecordsClientError(Exception):
    """Raised when the records API returns an error payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class RecordsClient:
    def __init__(
        self,
        session: Any = None,
        base_url: str = "",
        customer_id: str | None = None,
        customer_name: str | None = None,
        timeout: float = 60,
    ) -> None:
        self._session = session if session is not None else requests.Session()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers: dict[str, str] = {}
        if customer_id:
            self._headers["x-auth-id"] = customer_id
        if customer_name:
            self._headers["x-customer-name"] = customer_name

    @staticmethod
    def build_params(
        action_key: str,
        search: str = "",
        integration_key: str = "",
        cursor: str | None = None,
    ) -> dict[str, str]:
        """Query parameters for the records endpoints; custom forms send their form id as instanceKey."""
        params = {"action": action_key}
        if cursor:
            params["cursor"] = cursor
        if search:
            params["search"] = search
        if is_custom_form_action(action_key):
            params["instanceKey"] = form_id_from_action(action_key) or ""
        if integration_key:
            params["integrationKey"] = integration_key
        return params

    def _get(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        resp = self._session.get(
            f"{self._base_url}{path}",
            params=params,
            headers=self._headers,
            timeout=self._timeout,
        )
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.status_code >= 400 or (isinstance(body, dict) and body.get("error")):
            message = body.get("error") if isinstance(body, dict) else None
            raise RecordsClientError(message or f"HTTP {resp.status_code}", status_code=resp.status_code)
        return body

    def list_page(
        self,
        action_key: str,
        search: str = "",
        integration_key: str = "",
        cursor: str | None = None,
    ) -> dict[str, Any]:
        """One page: {"records": [...], "cursor": str | None}."""
        params = self.build_params(action_key, search, integration_key, cursor)
        return self._get("/api/records", params)

    def iter_records(
        self,
        action_key: str,
        search: str = "",
        integration_key: str = "",
    ) -> Iterator[dict[str, Any]]:
        """All matching records, following the cursor until it is empty."""
        cursor: str | None = None
        while True:
            page = self.list_page(action_key, search, integration_key, cursor)
            yield from page.get("records") or []
            cursor = page.get("cursor")
            if not cursor:
                return

    def import_records(self, action_key: str, integration_key: str = "") -> dict[str, Any]:
        """Trigger an import; returns the counts reported by the server."""
        params = self.build_params(action_key, integration_key=integration_key)
        result = self._get("/api/records/import", params)
        logger.info(
            "Imported %s records (%s new)",
            result.get("recordsCount"),
            result.get("newRecordsCount"),
        )
        return result
