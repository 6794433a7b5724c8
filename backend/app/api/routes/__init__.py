"""
Aggregate API routes.

Convention: Use "" (not "/") for the root path of a segment (e.g. @router.get(""), @router.post(""))
so the route is /api/records not /api/records/. This avoids 307 redirects when the
request arrives without a trailing slash.
"""

from fastapi import APIRouter

from app.api.endpoints import forms, integrations, records, schema, webhooks

api_router = APIRouter()

api_router.include_router(records.router, prefix="")
api_router.include_router(webhooks.router, prefix="")
api_router.include_router(schema.router, prefix="")
api_router.include_router(forms.router, prefix="")
api_router.include_router(integrations.router, prefix="")
