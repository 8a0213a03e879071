"""Chat assistant request/response models."""
from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """A question about the user's goals."""

    message: str = Field(min_length=1)


class ChatResponse(BaseModel):
    """Assistant answer."""

    response: str
