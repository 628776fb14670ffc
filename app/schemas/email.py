"""Reset-code email response schema."""

from pydantic import BaseModel


class ResetCodeResponse(BaseModel):
    """Outcome of a reset-code dispatch."""

    success: bool
    message: str
