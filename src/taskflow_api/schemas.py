from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Priority = Literal["low", "medium", "high"]

# Shared type for incoming dueDate which can be a date, datetime, or ISO8601 string
DueDateInput = Union[date, datetime, str]

IMMUTABLE_FIELDS = ("id", "createdAt", "created_at")


def _parse_due_date(value: Optional[DueDateInput]) -> Optional[date]:
    """
    Internal helper to normalize dueDate input into a date.
    - None and the empty string (an unset HTML date input) mean "no due date".
    - A datetime is truncated to its date.
    - A string is parsed as an ISO date first, then as an ISO datetime.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return date.fromisoformat(s)
        except ValueError:
            try:
                return datetime.fromisoformat(s).date()
            except ValueError as e:
                raise ValueError(
                    "Invalid dueDate format. Use an ISO8601 date or datetime string (e.g., '2025-01-31')."
                ) from e

    raise ValueError("Invalid type for dueDate; expected date, datetime, or ISO8601 string.")


def _clean_text(v: str, name: str) -> str:
    s = v.strip()
    if not (1 <= len(s) <= 200):
        raise ValueError(f"{name} length must be between 1 and 200 characters")
    return s


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# PUBLIC_INTERFACE
class TaskCreate(_CamelModel):
    """
    Draft for creating a new Task. The server assigns id, completed and createdAt.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Complete web app assignment",
                "category": "Study",
                "priority": "high",
                "dueDate": "2025-01-15",
            }
        }
    )

    title: str = Field(..., description="Short title for the task", min_length=1, max_length=200)
    category: str = Field(..., description="Free-text category label", min_length=1, max_length=200)
    priority: Priority = Field(..., description="Task priority")
    due_date: Optional[date] = Field(default=None, description="Optional ISO8601 due date")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _clean_text(v, "title")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _clean_text(v, "category")

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Optional[DueDateInput]) -> Optional[date]:
        return _parse_due_date(v)


# PUBLIC_INTERFACE
class TaskUpdate(_CamelModel):
    """
    Patch for an existing Task.
    All fields are optional; only provided fields will be updated.
    dueDate may be sent as null to clear it. id and createdAt cannot be changed.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "completed": True,
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Short title for the task", min_length=1, max_length=200)
    category: Optional[str] = Field(default=None, description="Free-text category label", min_length=1, max_length=200)
    priority: Optional[Priority] = Field(default=None, description="Task priority")
    due_date: Optional[date] = Field(default=None, description="ISO8601 due date, or null to clear")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")

    @model_validator(mode="before")
    @classmethod
    def reject_immutable_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            touched = [k for k in IMMUTABLE_FIELDS if k in data]
            if touched:
                raise ValueError(f"Immutable task fields cannot be updated: {', '.join(touched)}")
        return data

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _clean_text(v, "title")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _clean_text(v, "category")

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Optional[DueDateInput]) -> Optional[date]:
        return _parse_due_date(v)


# PUBLIC_INTERFACE
class TaskOut(_CamelModel):
    """
    Schema returned by the API for a Task. Also the on-disk record format.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Complete web app assignment",
                "category": "Study",
                "priority": "high",
                "dueDate": "2025-01-15",
                "completed": False,
                "createdAt": "2025-01-10T09:15:30.123456Z",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task", ge=1)
    title: str = Field(..., description="Short title for the task")
    category: str = Field(..., description="Free-text category label")
    priority: str = Field(..., description="Task priority: low, medium or high")
    due_date: Optional[date] = Field(default=None, description="Optional due date")
    completed: bool = Field(default=False, description="Completion status flag")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")


# PUBLIC_INTERFACE
class StatsOut(_CamelModel):
    """Completion statistics derived from the current collection."""

    total: int = Field(..., description="Number of tasks")
    completed: int = Field(..., description="Number of completed tasks")
    pending: int = Field(..., description="total - completed")
    high_priority: int = Field(..., description="Pending tasks with high priority")
    by_category: Dict[str, int] = Field(default_factory=dict, description="Task count per category")


class DeleteResult(BaseModel):
    message: str = Field(..., description="Confirmation message")


class QuoteOut(BaseModel):
    text: str
    author: str


# PUBLIC_INTERFACE
class WeatherOut(_CamelModel):
    """
    Point-in-time weather snapshot, either live or synthetic.

    The flat fields are mirrored into the OpenWeatherMap body layout (name,
    main, weather[0], wind) read by the browser client.
    """

    city: str
    temperature: float = Field(..., description="Temperature in °C")
    feels_like: float = Field(..., description="Apparent temperature in °C")
    description: str
    icon: str = Field(default="01d", description="OpenWeatherMap icon code")
    humidity: int = Field(..., description="Relative humidity in %")
    wind_speed: float = Field(..., description="Wind speed in m/s")
    pressure: int = Field(..., description="Atmospheric pressure in hPa")
    source: Literal["live", "synthetic"] = "synthetic"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def name(self) -> str:
        return self.city

    @computed_field  # type: ignore[prop-decorator]
    @property
    def main(self) -> Dict[str, Any]:
        return {
            "temp": self.temperature,
            "feels_like": self.feels_like,
            "humidity": self.humidity,
            "pressure": self.pressure,
        }

    @computed_field  # type: ignore[prop-decorator]
    @property
    def weather(self) -> List[Dict[str, str]]:
        return [{"description": self.description, "icon": self.icon}]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def wind(self) -> Dict[str, float]:
        return {"speed": self.wind_speed}
