"""
Form definitions: the default forms plus custom forms a customer creates.
A stored definition is what enables schema editing for that record type.
"""

import logging
from typing import Any

from fastapi import Depends
from pymongo import ReturnDocument

from app.core.constants import DEFAULT_FORMS
from app.core.database import Database, get_database
from app.models.form import FormDefinition

logger = logging.getLogger(__name__)


class FormService:
    def __init__(self, database: Database) -> None:
        self._database = database

    def get(self, customer_id: str, form_id: str) -> FormDefinition | None:
        doc = self._database.form_definitions.find_one({"customerId": customer_id, "formId": form_id})
        if doc is None:
            return None
        return FormDefinition.model_validate(doc)

    def exists(self, customer_id: str, form_id: str) -> bool:
        return self.get(customer_id, form_id) is not None

    def list_forms(self, customer_id: str) -> list[FormDefinition]:
        """Default forms first, then the customer's stored forms not already listed."""
        forms = [FormDefinition(customer_id=customer_id, **_snake(f)) for f in DEFAULT_FORMS]
        seen = {f.form_id for f in forms}
        for doc in self._database.form_definitions.find({"customerId": customer_id}).sort("formId", 1):
            form = FormDefinition.model_validate(doc)
            if form.form_id not in seen:
                seen.add(form.form_id)
                forms.append(form)
        return forms

    def create(self, form: FormDefinition) -> FormDefinition:
        """Store the definition; an existing one for the same form id is returned unchanged."""
        doc = self._database.form_definitions.find_one_and_update(
            {"customerId": form.customer_id, "formId": form.form_id},
            {"$setOnInsert": form.model_dump(by_alias=True)},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        logger.info("Form %s ensured for customer %s", form.form_id, form.customer_id)
        return FormDefinition.model_validate(doc)

    def ensure_defaults(self, customer_id: str) -> list[FormDefinition]:
        return [
            self.create(FormDefinition(customer_id=customer_id, **_snake(f)))
            for f in DEFAULT_FORMS
        ]


def _snake(form: dict[str, Any]) -> dict[str, Any]:
    return {"form_id": form["formId"], "form_title": form["formTitle"], "type": form["type"]}


def get_form_service(database: Database = Depends(get_database)) -> FormService:
    """Dependency: return a FormService bound to the process database."""
    return FormService(database)
