"""Pydantic schemas for stops.

A stop carries narrative content plus one verification challenge. The
verification fields are a flat bag (password, options, correct_answer, gps_*);
which of them matter is decided by ``verification_type``. Changing the type
does not clear fields that belonged to the old type.
"""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.schemas.tour import as_utc, reject_nulls

DEFAULT_FAILURES_ALLOWED = 2
DEFAULT_GPS_RADIUS = 50


class VerificationType(str, Enum):
    TEXT = "text"
    MULTIPLE_CHOICE = "multiple_choice"
    GPS = "gps"
    PHOTO = "photo"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    YOUTUBE = "youtube"


class StopContent(BaseModel):
    """Everything about a stop except identity, owner and position."""

    name: str = ""
    address: str = ""
    story_text: str = ""
    instructions: str = ""
    menu_items: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)

    verification_type: VerificationType = VerificationType.TEXT
    password: str = ""
    options: list[str] = Field(default_factory=list)
    correct_answer: str | None = None
    is_info_only: bool = False

    media_type: MediaType = MediaType.IMAGE
    background_image: str | None = None
    image_url: str | None = None

    failures_allowed: int = Field(default=DEFAULT_FAILURES_ALLOWED, ge=0)
    auto_show_hint: bool = True
    enable_skip: bool = True

    gps_lat: float | None = None
    gps_lng: float | None = None
    gps_radius: float = DEFAULT_GPS_RADIUS

    transition_text: str = ""
    next_stop_preview: str = ""


class StopCreate(StopContent):
    model_config = ConfigDict(extra="forbid")

    tour_id: str = Field(min_length=1)
    stop_number: int = Field(ge=1)


class StopDraft(StopContent):
    """Body for appending a stop to a tour; the store picks the stop_number."""

    model_config = ConfigDict(extra="forbid")

    name: str = "New Stop"
    password: str = "1212"


NULLABLE_STOP_FIELDS = frozenset(
    {"correct_answer", "background_image", "image_url", "gps_lat", "gps_lng"}
)


class StopUpdate(BaseModel):
    """Settable stop fields. id, tour_id and created_at are not settable."""

    model_config = ConfigDict(extra="forbid")

    stop_number: int | None = Field(default=None, ge=1)
    name: str | None = None
    address: str | None = None
    story_text: str | None = None
    instructions: str | None = None
    menu_items: list[str] | None = None
    tips: list[str] | None = None
    verification_type: VerificationType | None = None
    password: str | None = None
    options: list[str] | None = None
    correct_answer: str | None = None
    is_info_only: bool | None = None
    media_type: MediaType | None = None
    background_image: str | None = None
    image_url: str | None = None
    failures_allowed: int | None = Field(default=None, ge=0)
    auto_show_hint: bool | None = None
    enable_skip: bool | None = None
    gps_lat: float | None = None
    gps_lng: float | None = None
    gps_radius: float | None = None
    transition_text: str | None = None
    next_stop_preview: str | None = None

    @model_validator(mode="after")
    def check_no_nulls(self):
        reject_nulls(self, NULLABLE_STOP_FIELDS)
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Stop(StopContent):
    model_config = ConfigDict(frozen=True)

    id: str
    tour_id: str
    stop_number: int
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)


class StopOrderSchema(BaseModel):
    stop_ids: list[str]
