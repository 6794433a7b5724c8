"""Integration list API schemas (used by the Integrations page)."""

from pydantic import BaseModel

from app.schemas.common import CamelModel


class IntegrationSummary(CamelModel):
    id: str
    key: str
    name: str
    logo_uri: str | None = None
    connected: bool = False
    connection_id: str | None = None


class IntegrationListResponse(BaseModel):
    integrations: list[IntegrationSummary]


class ActionSummary(BaseModel):
    id: str | None = None
    key: str
    name: str | None = None


class ActionListResponse(BaseModel):
    actions: list[ActionSummary]


class FailedAction(BaseModel):
    key: str
    error: str


class SyncActionsResponse(CamelModel):
    """Per-action outcome; failures do not stop the remaining actions."""
    integration_key: str
    actions_count: int
    created: list[str]
    failed: list[FailedAction]
