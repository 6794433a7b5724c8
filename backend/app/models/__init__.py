# Document models stored in MongoDB

from app.models.field_schema import FieldDescriptor, FieldSchema, FieldType
from app.models.form import FormDefinition
from app.models.record import Record

__all__ = [
    "Record",
    "FieldDescriptor",
    "FieldSchema",
    "FieldType",
    "FormDefinition",
]
