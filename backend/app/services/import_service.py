"""
Import: pull records page by page from a connection and store the ones not seen before.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from app.core.constants import ACTION_PREFIX, OBJECTS_ACTION
from app.models.record import Record
from app.services.integration_app_service import (
    IntegrationAppService,
    IntegrationAppServiceError,
    extract_cursor,
    extract_records,
)
from app.services.record_service import RecordService

logger = logging.getLogger(__name__)

UNKNOWN_INTEGRATION = "unknown"


@dataclass
class ImportResult:
    records_count: int = 0
    new_records_count: int = 0
    existing_records_count: int = 0
    pages: int = 0


class ImportService:
    """
    Runs the import loop for one customer and record type.

    Each page is fetched with the action first; if the action fails the data
    source with the matching key is listed instead, and from then on every
    page comes from the data source. When both fail the action's error is
    raised.
    """

    def __init__(
        self,
        integration_app: IntegrationAppService,
        records: RecordService,
        max_pages: int = 50,
        max_seconds: float = 120.0,
    ) -> None:
        self._integration_app = integration_app
        self._records = records
        self._max_pages = max_pages
        self._max_seconds = max_seconds

    @staticmethod
    def data_source_key(action_key: str, instance_key: str | None) -> str:
        if action_key == OBJECTS_ACTION:
            return instance_key or ""
        return action_key.replace(ACTION_PREFIX, "", 1)

    def _fetch_page(
        self,
        connection_id: str,
        action_key: str,
        instance_key: str | None,
        cursor: str | None,
        use_data_source: bool,
    ) -> tuple[Any, bool]:
        """Return (raw result, used data source)."""
        if not use_data_source:
            try:
                result = self._integration_app.run_action(
                    connection_id,
                    action_key,
                    payload={"cursor": cursor},
                    instance_key=instance_key,
                )
                return result, False
            except IntegrationAppServiceError as action_error:
                logger.error("Error running action %s: %s", action_key, action_error.message)
                try:
                    return self._list_data_source(connection_id, action_key, instance_key, cursor), True
                except IntegrationAppServiceError as alternative_error:
                    logger.error("Data source fallback also failed: %s", alternative_error.message)
                    raise action_error
        return self._list_data_source(connection_id, action_key, instance_key, cursor), True

    def _list_data_source(
        self,
        connection_id: str,
        action_key: str,
        instance_key: str | None,
        cursor: str | None,
    ) -> Any:
        key = self.data_source_key(action_key, instance_key)
        if not key:
            raise IntegrationAppServiceError("No data source key available for alternative approach")
        logger.info("Listing data source %s (cursor=%s)", key, cursor)
        return self._integration_app.list_data_source_records(connection_id, key, cursor=cursor)

    def _save_page(
        self,
        raw_records: list[dict[str, Any]],
        customer_id: str,
        record_type: str,
        integration_key: str,
        result: ImportResult,
    ) -> None:
        for raw in raw_records:
            if raw.get("id") in (None, ""):
                logger.warning("Skipping record without id: %s", raw.get("name"))
                continue
            try:
                record = Record.from_source(
                    raw,
                    customer_id=customer_id,
                    record_type=record_type,
                    integration_key=integration_key,
                )
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid record %s: %s",
                    raw.get("id"),
                    "; ".join(err["msg"] for err in e.errors()),
                )
                continue
            result.records_count += 1
            if self._records.insert_if_absent(record):
                result.new_records_count += 1
                logger.debug("Saved new record %s", record.id)
            else:
                result.existing_records_count += 1
                logger.debug("Record %s already exists, skipping", record.id)

    def run(
        self,
        connection: dict[str, Any],
        *,
        customer_id: str,
        action_key: str,
        record_type: str,
        instance_key: str | None = None,
        integration_key: str | None = None,
    ) -> ImportResult:
        connection_id = str(connection.get("id") or "")
        final_integration_key = (
            integration_key
            or (connection.get("integration") or {}).get("key")
            or UNKNOWN_INTEGRATION
        )
        if final_integration_key == UNKNOWN_INTEGRATION:
            logger.error("No integration key available for connection %s", connection_id)

        result = ImportResult()
        cursor: str | None = None
        use_data_source = False
        started = time.monotonic()

        while True:
            logger.info("Fetching records with cursor: %s", cursor)
            raw, use_data_source = self._fetch_page(
                connection_id, action_key, instance_key, cursor, use_data_source
            )
            page = extract_records(raw)
            result.pages += 1
            self._save_page(page, customer_id, record_type, final_integration_key, result)

            cursor = extract_cursor(raw)
            if not cursor or not page:
                break
            if result.pages >= self._max_pages:
                logger.warning("Import stopped at page limit %d (cursor=%s)", self._max_pages, cursor)
                break
            if time.monotonic() - started >= self._max_seconds:
                logger.warning("Import stopped after %.0fs (cursor=%s)", self._max_seconds, cursor)
                break

        logger.info(
            "Import completed. Total records processed: %d, New: %d, Existing: %d, Pages: %d",
            result.records_count,
            result.new_records_count,
            result.existing_records_count,
            result.pages,
        )
        return result
