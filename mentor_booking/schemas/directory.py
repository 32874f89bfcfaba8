"""Pydantic schemas for mentor and student registration."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from mentor_booking.db.types import normalize_tags


class MentorCreate(BaseModel):
    """Schema for registering a mentor."""

    name: str = Field(..., min_length=1, max_length=200)
    expertise: list[str] = Field(
        ...,
        min_length=1,
        description="Interest-area tags the mentor covers",
        examples=[["biology", "chemistry"]],
    )
    premium: bool = False

    @field_validator("expertise")
    @classmethod
    def validate_expertise(cls, value: list[str]) -> list[str]:
        return sorted(normalize_tags(value))


class MentorRead(BaseModel):
    """Schema for reading a mentor."""

    id: str
    name: str
    expertise: list[str]
    premium: bool
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("expertise", mode="before")
    @classmethod
    def sort_expertise(cls, value: object) -> object:
        if isinstance(value, (set, frozenset)):
            return sorted(value)
        return value


class StudentCreate(BaseModel):
    """Schema for registering a student."""

    name: str = Field(..., min_length=1, max_length=200)
    area_of_interest: str = Field(..., min_length=1, max_length=100, examples=["biology"])

    @field_validator("area_of_interest")
    @classmethod
    def validate_area_of_interest(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Area of interest must not be blank")
        return stripped


class StudentRead(BaseModel):
    """Schema for reading a student."""

    id: str
    name: str
    area_of_interest: str
    created_at: datetime

    model_config = {"from_attributes": True}
