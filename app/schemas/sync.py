"""Pydantic schemas for the sync snapshot and its HTTP bodies."""
from pydantic import BaseModel, model_validator

from app.schemas.stop import Stop
from app.schemas.tour import Tour


def _first_duplicate(ids: list[str]) -> str | None:
    seen = set()
    for record_id in ids:
        if record_id in seen:
            return record_id
        seen.add(record_id)
    return None


class SnapshotSchema(BaseModel):
    tours: list[Tour]
    stops: list[Stop]

    @model_validator(mode="after")
    def check_unique_ids(self):
        duplicate = _first_duplicate([t.id for t in self.tours])
        if duplicate is not None:
            raise ValueError(f"duplicate tour id {duplicate!r}")
        duplicate = _first_duplicate([s.id for s in self.stops])
        if duplicate is not None:
            raise ValueError(f"duplicate stop id {duplicate!r}")
        return self


class SyncCodeSchema(BaseModel):
    code: str


class DashboardStatsSchema(BaseModel):
    total_tours: int
    active_tours: int
    total_stops: int
