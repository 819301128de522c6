"""Pydantic schemas for the player surface.

Stops are shown without ``password`` and ``correct_answer``; tips only appear
once the player opens the hint.
"""
from datetime import date

from pydantic import BaseModel, ConfigDict

from app.schemas.stop import MediaType, VerificationType
from app.services.player import NotificationKind, PlayState


class StopViewSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    stop_number: int
    name: str
    address: str
    story_text: str
    instructions: str
    menu_items: list[str]
    verification_type: VerificationType
    options: list[str]
    is_info_only: bool
    media_type: MediaType
    background_image: str | None = None
    image_url: str | None = None
    gps_lat: float | None = None
    gps_lng: float | None = None
    gps_radius: float
    transition_text: str
    next_stop_preview: str


class NextStopSchema(BaseModel):
    name: str
    address: str
    maps_url: str | None = None


class NotificationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: NotificationKind
    message: str


class PlaySessionOutSchema(BaseModel):
    tour_id: str
    tour_name: str
    tour_description: str
    state: PlayState
    stop_index: int
    stop_count: int
    failed_attempts: int
    can_skip: bool
    hint_visible: bool
    tips: list[str] = []
    current_stop: StopViewSchema | None = None
    next_stop: NextStopSchema | None = None


class AnswerSubmitSchema(BaseModel):
    answer: str | None = None


class AnswerOutSchema(BaseModel):
    correct: bool
    skipped: bool = False
    notifications: list[NotificationSchema]
    session: PlaySessionOutSchema


class CertificateRequestSchema(BaseModel):
    name: str | None = None


class CertificateOutSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    agent_name: str
    tour_name: str
    issued_on: date
    credential_id: str
