from typing import Literal, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from schemas.base import RequestSchema


class ProgressPatch(RequestSchema):
    """
    Body of POST/PUT /api/progress/resource/<id>.

    Every field is optional; `timeSpentMinutes` is an increment added to the
    stored total, `notes` is stored as sent.
    """

    model_config = ConfigDict(str_strip_whitespace=False)

    status: Optional[Literal["not_started", "in_progress", "completed"]] = None
    completion_percentage: Optional[float] = Field(None, ge=0, le=100)
    time_spent_minutes: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator("completion_percentage", "time_spent_minutes", mode="before")
    @classmethod
    def reject_booleans(cls, value):
        # bool is an int subclass, lax mode would read true as 1
        if isinstance(value, bool):
            raise ValueError("must be a number")
        return value

    @model_validator(mode="after")
    def reject_null_values(self):
        for name in ("status", "completion_percentage", "time_spent_minutes"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
