# Services: Integration.app, MongoDB-backed records/schemas/forms, import

from app.services.form_service import FormService, get_form_service
from app.services.import_service import ImportResult, ImportService
from app.services.integration_app_service import (
    IntegrationAppService,
    IntegrationAppServiceError,
    get_integration_app_service,
)
from app.services.integration_sync_service import (
    IntegrationSyncService,
    get_integration_sync_service,
)
from app.services.record_service import RecordService, get_record_service
from app.services.records_client import RecordsClient, RecordsClientError
from app.services.schema_service import SchemaService, SchemaServiceError, get_schema_service

__all__ = [
    "FormService",
    "get_form_service",
    "ImportResult",
    "ImportService",
    "IntegrationAppService",
    "IntegrationAppServiceError",
    "get_integration_app_service",
    "IntegrationSyncService",
    "get_integration_sync_service",
    "RecordService",
    "get_record_service",
    "RecordsClient",
    "RecordsClientError",
    "SchemaService",
    "SchemaServiceError",
    "get_schema_service",
]
