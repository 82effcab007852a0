"""
Shared response base: timestamps always leave the API as aware UTC.
"""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from mockhire.core.timeutils import as_utc


class ORMResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    @field_validator("*", mode="after")
    @classmethod
    def _utc_datetimes(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return as_utc(v)
        return v
