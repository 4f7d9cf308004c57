"""Error response schema."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Structured error body returned for every failed request."""

    status: int
    code: str
    message: str
