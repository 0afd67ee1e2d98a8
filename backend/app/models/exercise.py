import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Exercise(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = ""
    description: str = ""
    type: Literal["terminal", "code"]
    task: str = ""
    validation: str
    points: int = Field(default=10, ge=0)

    # Answer key, never sent to the client.
    output: str | None = None
    hint: str | None = None
    pattern: str | None = None
    failure_message: str | None = Field(default=None, alias="failureMessage")

    @field_validator("points", mode="before")
    @classmethod
    def _round_fractional_points(cls, v):
        # Generated exercises sometimes carry 12.5; round half up.
        if isinstance(v, float) and math.isfinite(v):
            return int(math.floor(v + 0.5))
        return v
