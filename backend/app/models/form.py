"""
Pydantic model for form definitions (formdefinitions collection).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FormDefinition(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    customer_id: str
    form_id: str
    form_title: str
    type: str = "custom"
