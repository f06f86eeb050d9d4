from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase JSON keys; snake_case names still work in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ErrorResponse(CamelModel):
    success: bool = False
    message: str
    error: str | None = None


class InsufficientPointsResponse(ErrorResponse):
    insufficient_points: bool = True
    required_points: int
    current_points: int | None = None
