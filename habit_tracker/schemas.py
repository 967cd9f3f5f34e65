import re
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

Frequency = Literal["daily", "weekly", "custom"]


def normalize_days(days):
    if any(day < 0 or day > 6 for day in days):
        raise ValueError("days must be between 0 (Sunday) and 6 (Saturday)")
    return sorted(set(days))


def check_reminder_time(value):
    if value is not None and not TIME_PATTERN.match(value):
        raise ValueError("reminder time must be HH:MM")
    return value


class RequestModel(BaseModel):
    # Clients send camelCase; unknown keys such as userId are dropped
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class HabitCreate(RequestModel):
    name: str = Field(min_length=1, max_length=100)
    category: str = Field(min_length=1, max_length=50)
    frequency: Frequency = "daily"
    days_of_week: List[int] = Field(default_factory=lambda: list(range(7)))
    reminder_time: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("days_of_week")
    @classmethod
    def check_days(cls, value):
        return normalize_days(value)

    @field_validator("reminder_time")
    @classmethod
    def check_time(cls, value):
        return check_reminder_time(value)


class HabitUpdate(RequestModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    frequency: Optional[Frequency] = None
    days_of_week: Optional[List[int]] = None
    reminder_time: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name", "category", "frequency", "days_of_week", mode="before")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    @field_validator("days_of_week")
    @classmethod
    def check_days(cls, value):
        return normalize_days(value)

    @field_validator("reminder_time")
    @classmethod
    def check_time(cls, value):
        return check_reminder_time(value)


class CompletionCreate(RequestModel):
    date: str
    completed: bool = False
    completion_percentage: int = 0

    @field_validator("date")
    @classmethod
    def check_date(cls, value):
        try:
            parsed = date.fromisoformat(value)
        except ValueError:
            raise ValueError("date must be YYYY-MM-DD") from None
        if parsed.isoformat() != value:
            raise ValueError("date must be YYYY-MM-DD")
        return value


def error_fields(exc):
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
