"""Pydantic models for phonebook records and request bodies."""

from pydantic import BaseModel, ConfigDict, Field


class Person(BaseModel):
    """A stored phonebook record.  Frozen once the store has built it."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., gt=0)
    name: str
    number: str


class PersonCreate(BaseModel):
    """Body of ``POST /api/persons``.  Both fields must be non-empty strings."""

    name: str = Field(..., min_length=1)
    number: str = Field(..., min_length=1)


class ErrorResponse(BaseModel):
    error: str
