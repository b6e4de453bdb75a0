from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from core.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class CamelSchema(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


def validate_form(schema: type[SchemaT], message: str, **data: Any) -> SchemaT:
    """Build a form schema, reporting any failure as a single ValidationError."""
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError:
        raise ValidationError(message) from None
