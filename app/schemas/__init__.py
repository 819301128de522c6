from app.schemas.stop import Stop, StopCreate, StopDraft, StopUpdate, VerificationType
from app.schemas.sync import SnapshotSchema
from app.schemas.tour import Tour, TourCreate, TourUpdate

__all__ = [
    "SnapshotSchema",
    "Stop",
    "StopCreate",
    "StopDraft",
    "StopUpdate",
    "Tour",
    "TourCreate",
    "TourUpdate",
    "VerificationType",
]
