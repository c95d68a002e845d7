from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema for the public JSON contract.

    Fields are declared in snake_case and exposed in camelCase (``parentId``,
    ``productCount``, ``finalPrice``...). Input accepts either spelling.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def reject_null(value):
    """Partial updates may omit a required column but not clear it."""
    if value is None:
        raise ValueError("may not be null")
    return value
