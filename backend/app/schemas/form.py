"""Form API schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Form(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    form_id: str
    form_title: str
    type: str


class FormCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    form_id: str | None = Field(None, description="Record type / custom object key")
    form_title: str | None = None


class FormListResponse(BaseModel):
    forms: list[Form]
