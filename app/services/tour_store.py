"""Tour store: the only owner of tour and stop records.

Records live in memory and the whole collection pair is written to a
``KeyValueStorage`` after every mutation. Unknown ids are reported as
``None``/``False``; nothing here raises for a missing record.

Lifecycle: construct once, ``await store.load()``, then share the instance.
"""
from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from app.core.config import Settings, get_settings
from app.schemas.stop import Stop, StopCreate, StopDraft, StopUpdate
from app.schemas.tour import Tour, TourCreate, TourUpdate
from app.services.migrations import UnknownVersionError, migrate
from app.services.seeding import build_demo_dataset
from app.services.snapshot import SnapshotError, decode_snapshot, encode_snapshot
from app.services.storage import KeyValueStorage

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"


class StoreNotLoadedError(RuntimeError):
    """The store was used before ``load()``."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def _parse_records(raw: str | None) -> list[dict]:
    if not raw:
        return []
    data = json.loads(raw)
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError("expected a JSON array of objects")
    return data


class TourStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.storage = storage
        self.settings = settings or get_settings()
        self.clock = clock
        self._tours: list[Tour] = []
        self._stops: list[Stop] = []
        self._loaded = False
        # Serializes writes so a cascade and a reorder never interleave
        self._lock = asyncio.Lock()

    # ---------- lifecycle ----------

    async def load(self) -> None:
        """Load persisted records; migrate or reseed when they can't be used as-is."""
        settings = self.settings
        current = settings.data_version
        async with self._lock:
            version = await self.storage.get_item(settings.version_key)
            try:
                raw_tours = _parse_records(await self.storage.get_item(settings.tours_key))
                raw_stops = _parse_records(await self.storage.get_item(settings.stops_key))
                if not raw_tours:
                    logger.info("No persisted tours, seeding demo data")
                    await self._reseed()
                    return
                migrated = False
                if version != current:
                    if not settings.migrate_on_version_bump:
                        logger.info("Data version %r != %r, reseeding", version, current)
                        await self._reseed()
                        return
                    raw_tours, raw_stops = migrate(raw_tours, raw_stops, version, current)
                    migrated = True
                tours = [Tour.model_validate(t) for t in raw_tours]
                stops = [Stop.model_validate(s) for s in raw_stops]
            except (ValueError, TypeError, UnknownVersionError) as exc:
                logger.warning("Persisted tour data unusable (version %r), reseeding: %s", version, exc)
                await self._reseed()
                return

            if migrated:
                logger.info("Migrated tour data from version %r to %r", version, current)
                await self._commit(tours, stops)
            else:
                self._tours, self._stops = tours, stops
            self._loaded = True
            logger.info("Loaded %d tours and %d stops", len(tours), len(stops))

    async def reset_to_factory(self) -> None:
        """Drop every tour and stop and reseed the demo dataset."""
        self._require_loaded()
        async with self._lock:
            logger.info("Factory reset: discarding %d tours and %d stops", len(self._tours), len(self._stops))
            await self._reseed()

    async def _reseed(self) -> None:
        tours, stops = build_demo_dataset(self.clock())
        await self._commit(tours, stops)
        self._loaded = True

    async def _commit(self, tours: list[Tour], stops: list[Stop]) -> None:
        """Persist both collections in one write, then swap them in."""
        settings = self.settings
        await self.storage.set_items(
            {
                settings.tours_key: json.dumps([t.model_dump(mode="json") for t in tours], ensure_ascii=False),
                settings.stops_key: json.dumps([s.model_dump(mode="json") for s in stops], ensure_ascii=False),
                settings.version_key: settings.data_version,
            }
        )
        self._tours, self._stops = tours, stops

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise StoreNotLoadedError("TourStore.load() has not been awaited")

    # ---------- tours ----------

    async def list_tours(self) -> list[Tour]:
        """All tours, newest first."""
        self._require_loaded()
        ordered = sorted(self._tours, key=lambda t: t.created_at, reverse=True)
        return [t.model_copy(deep=True) for t in ordered]

    async def list_active_tours(self) -> list[Tour]:
        return [t for t in await self.list_tours() if t.is_active]

    async def get_tour(self, tour_id: str) -> Tour | None:
        self._require_loaded()
        tour = self._find_tour(tour_id)
        return tour.model_copy(deep=True) if tour else None

    async def create_tour(self, data: TourCreate) -> Tour:
        self._require_loaded()
        async with self._lock:
            now = self.clock()
            tour = Tour(**data.model_dump(), id=new_id(), created_at=now, updated_at=now)
            await self._commit([*self._tours, tour], self._stops)
        logger.info("Created tour %s (%s)", tour.id, tour.name)
        return tour.model_copy(deep=True)

    async def update_tour(self, tour_id: str, data: TourUpdate) -> Tour | None:
        self._require_loaded()
        async with self._lock:
            current = self._find_tour(tour_id)
            if current is None:
                return None
            updated_at = max(self.clock(), current.updated_at)
            tour = current.model_copy(update={**data.changes(), "updated_at": updated_at})
            tours = [tour if t.id == tour_id else t for t in self._tours]
            await self._commit(tours, self._stops)
        return tour.model_copy(deep=True)

    async def delete_tour(self, tour_id: str) -> bool:
        """Delete a tour and every stop that belongs to it, in one write."""
        self._require_loaded()
        async with self._lock:
            if self._find_tour(tour_id) is None:
                return False
            tours = [t for t in self._tours if t.id != tour_id]
            stops = [s for s in self._stops if s.tour_id != tour_id]
            removed = len(self._stops) - len(stops)
            await self._commit(tours, stops)
        logger.info("Deleted tour %s with %d stops", tour_id, removed)
        return True

    async def duplicate_tour(self, tour_id: str) -> Tour | None:
        """Copy a tour and all its stops under fresh ids. The copy starts inactive."""
        self._require_loaded()
        async with self._lock:
            source = self._find_tour(tour_id)
            if source is None:
                return None
            now = self.clock()
            copy = source.model_copy(
                update={
                    "id": new_id(),
                    "name": f"{source.name}{COPY_SUFFIX}",
                    "is_active": False,
                    "created_at": now,
                    "updated_at": now,
                },
                deep=True,
            )
            stop_copies = [
                stop.model_copy(update={"id": new_id(), "tour_id": copy.id, "created_at": now}, deep=True)
                for stop in self._sorted_stops(tour_id)
            ]
            await self._commit([*self._tours, copy], [*self._stops, *stop_copies])
        logger.info("Duplicated tour %s as %s (%d stops)", tour_id, copy.id, len(stop_copies))
        return copy.model_copy(deep=True)

    async def stats(self) -> dict[str, int]:
        self._require_loaded()
        return {
            "total_tours": len(self._tours),
            "active_tours": sum(1 for t in self._tours if t.is_active),
            "total_stops": len(self._stops),
        }

    # ---------- stops ----------

    async def list_stops(self, tour_id: str) -> list[Stop]:
        """Stops of one tour, ordered by stop_number."""
        self._require_loaded()
        return [s.model_copy(deep=True) for s in self._sorted_stops(tour_id)]

    async def get_stop(self, stop_id: str) -> Stop | None:
        self._require_loaded()
        stop = self._find_stop(stop_id)
        return stop.model_copy(deep=True) if stop else None

    async def create_stop(self, data: StopCreate) -> Stop:
        # tour_id is not checked against existing tours
        self._require_loaded()
        async with self._lock:
            stop = Stop(**data.model_dump(), id=new_id(), created_at=self.clock())
            await self._commit(self._tours, [*self._stops, stop])
        return stop.model_copy(deep=True)

    async def append_stop(self, tour_id: str, draft: StopDraft) -> Stop | None:
        """Create a stop at the end of a tour. None if the tour doesn't exist."""
        self._require_loaded()
        async with self._lock:
            if self._find_tour(tour_id) is None:
                return None
            number = len(self._sorted_stops(tour_id)) + 1
            stop = Stop(
                **draft.model_dump(),
                id=new_id(),
                tour_id=tour_id,
                stop_number=number,
                created_at=self.clock(),
            )
            await self._commit(self._tours, [*self._stops, stop])
        return stop.model_copy(deep=True)

    async def update_stop(self, stop_id: str, data: StopUpdate) -> Stop | None:
        # Merge only; a new verification_type keeps the old password/options
        self._require_loaded()
        async with self._lock:
            current = self._find_stop(stop_id)
            if current is None:
                return None
            stop = current.model_copy(update=data.changes())
            stops = [stop if s.id == stop_id else s for s in self._stops]
            await self._commit(self._tours, stops)
        return stop.model_copy(deep=True)

    async def delete_stop(self, stop_id: str) -> bool:
        self._require_loaded()
        async with self._lock:
            if self._find_stop(stop_id) is None:
                return False
            await self._commit(self._tours, [s for s in self._stops if s.id != stop_id])
        return True

    async def reorder_stops(self, tour_id: str, ordered_ids: list[str]) -> list[Stop]:
        """Set stop_number = position + 1 for each id that belongs to ``tour_id``.

        Ids of other tours and unknown ids are skipped. Stops of the tour that
        are missing from ``ordered_ids`` keep their number. A repeated id takes
        its last position.
        """
        self._require_loaded()
        async with self._lock:
            numbers = {}
            for position, stop_id in enumerate(ordered_ids):
                numbers[stop_id] = position + 1
            stops = [
                s.model_copy(update={"stop_number": numbers[s.id]})
                if s.tour_id == tour_id and s.id in numbers
                else s
                for s in self._stops
            ]
            await self._commit(self._tours, stops)
        return [s.model_copy(deep=True) for s in self._sorted_stops(tour_id)]

    # ---------- sync ----------

    async def export_snapshot(self) -> str:
        self._require_loaded()
        return encode_snapshot(self._tours, self._stops)

    async def import_snapshot(self, blob: str) -> bool:
        """Replace everything with the snapshot's records. False (and no change) if the blob is bad."""
        self._require_loaded()
        try:
            snapshot = decode_snapshot(blob)
        except SnapshotError as exc:
            logger.warning("Rejected sync import: %s", exc)
            return False
        async with self._lock:
            await self._commit(list(snapshot.tours), list(snapshot.stops))
        logger.info("Imported %d tours and %d stops", len(snapshot.tours), len(snapshot.stops))
        return True

    # ---------- helpers ----------

    def _find_tour(self, tour_id: str) -> Tour | None:
        return next((t for t in self._tours if t.id == tour_id), None)

    def _find_stop(self, stop_id: str) -> Stop | None:
        return next((s for s in self._stops if s.id == stop_id), None)

    def _sorted_stops(self, tour_id: str) -> list[Stop]:
        return sorted((s for s in self._stops if s.tour_id == tour_id), key=lambda s: s.stop_number)
