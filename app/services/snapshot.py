"""Sync snapshot codec: base64 of the JSON ``{"tours": [...], "stops": [...]}``."""
import base64
import binascii
import json

from app.schemas.stop import Stop
from app.schemas.sync import SnapshotSchema
from app.schemas.tour import Tour


class SnapshotError(ValueError):
    """Blob is not base64, not JSON, or not a valid tours/stops document."""


def encode_snapshot(tours: list[Tour], stops: list[Stop]) -> str:
    doc = SnapshotSchema(tours=tours, stops=stops).model_dump(mode="json")
    raw = json.dumps(doc, ensure_ascii=False).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_snapshot(blob: str) -> SnapshotSchema:
    # Pasted codes often pick up line breaks
    compact = "".join((blob or "").split())
    if not compact:
        raise SnapshotError("empty sync code")
    try:
        raw = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SnapshotError(f"not base64: {exc}") from exc
    try:
        return SnapshotSchema.model_validate_json(raw)
    except ValueError as exc:
        raise SnapshotError(f"invalid snapshot: {exc}") from exc
