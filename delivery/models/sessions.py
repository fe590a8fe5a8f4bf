"""Respondent session Pydantic models."""
from pydantic import BaseModel, Field


class SessionStartRequest(BaseModel):
    """Model for starting or resuming a session."""

    respondentName: str | None = Field(default=None, max_length=200)
    password: str | None = Field(default=None, max_length=72)


class ResponsePayload(BaseModel):
    """A response in display index space; null clears it."""

    value: int | list[int] | str | None = None


class SubmitRequest(BaseModel):
    """Model for submitting a session.

    Responses sent here are merged over the ones already recorded.
    """

    respondentName: str | None = Field(default=None, max_length=200)
    responses: dict[str, int | list[int] | str | None] = {}
