"""Pydantic schemas for tours: stored record, create body, partial update mask."""
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

THEMES = ("detective", "witches", "spy", "pirates", "mystery")
DEFAULT_THEME = "detective"


def reject_nulls(model: BaseModel, nullable: frozenset[str]) -> None:
    """Raise if an explicitly-sent field is null but the record can't hold null."""
    for name in model.model_fields_set:
        if getattr(model, name) is None and name not in nullable:
            raise ValueError(f"{name} may not be null")


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps (hand-edited snapshots) as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TourFields(BaseModel):
    name: str
    description: str = ""
    city: str = ""
    theme: str = DEFAULT_THEME  # usually one of THEMES, not enforced
    cover_image: str | None = None
    is_active: bool = False


class TourCreate(TourFields):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)


class TourUpdate(BaseModel):
    """Settable tour fields. id and timestamps are not settable."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    city: str | None = None
    theme: str | None = None
    cover_image: str | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def check_no_nulls(self):
        reject_nulls(self, frozenset({"cover_image"}))
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Tour(TourFields):
    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value: datetime) -> datetime:
        return as_utc(value)
