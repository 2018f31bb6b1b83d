from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import Field as PydanticField
from pydantic_core import PydanticCustomError
from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def get_utc_now():
    """Helper function to get current UTC time with timezone"""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TaskBase(SQLModel):
    """Base model with shared fields"""

    title: str
    description: str | None = None


class Task(TaskBase, table=True):
    """Database model"""

    __tablename__ = "tasks"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(max_length=TITLE_MAX_LENGTH, index=True)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    completed: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=get_utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=get_utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class TaskPayload(TaskBase):
    """Fields and rules shared by the create and update payloads"""

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("title_blank", "Title is required")
        if not TITLE_MIN_LENGTH <= len(value) <= TITLE_MAX_LENGTH:
            raise PydanticCustomError(
                "title_length",
                "Title must be between {min} and {max} characters",
                {"min": TITLE_MIN_LENGTH, "max": TITLE_MAX_LENGTH},
            )
        return value

    @field_validator("description")
    @classmethod
    def check_description(cls, value: str | None) -> str | None:
        if value is not None and len(value) > DESCRIPTION_MAX_LENGTH:
            raise PydanticCustomError(
                "description_length",
                "Description cannot exceed {max} characters",
                {"max": DESCRIPTION_MAX_LENGTH},
            )
        return value


class TaskCreate(TaskPayload):
    """Schema for creating a task, completion is always set by the server"""

    def to_task(self) -> Task:
        return Task(title=self.title, description=self.description, completed=False)


class TaskUpdate(TaskPayload):
    """Schema for a full update - every mutable field is replaced"""

    completed: bool


class TaskResponse(BaseModel):
    """Schema for task responses"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    completed: bool
    created_at: datetime = PydanticField(serialization_alias="createdAt")
    updated_at: datetime = PydanticField(serialization_alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class TaskStats(BaseModel):
    completed: int
    pending: int
    total: int


class ErrorResponse(BaseModel):
    """Uniform error body returned by every exception handler"""

    timestamp: datetime = PydanticField(default_factory=get_utc_now)
    status: int
    error: str
    message: str
    validation_errors: dict[str, str] | None = PydanticField(
        default=None, serialization_alias="validationErrors"
    )
