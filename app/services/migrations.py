"""Additive migrations for persisted tour/stop records.

Each step takes the raw JSON records of one data version and returns them in
the shape of the next version. Steps only add or backfill fields; they never
drop user content.
"""
from collections.abc import Callable

Records = list[dict]
Step = Callable[[Records, Records], tuple[Records, Records]]


class UnknownVersionError(Exception):
    """No migration path from the persisted version to the current one."""


def _v1_to_v2(tours: Records, stops: Records) -> tuple[Records, Records]:
    # v2 introduced verification types and list-valued flavor fields
    for stop in stops:
        stop.setdefault("verification_type", "text")
        stop.setdefault("password", "")
        stop["menu_items"] = list(stop.get("menu_items") or [])
        stop["tips"] = list(stop.get("tips") or [])
        stop.setdefault("gps_radius", 50)
    for tour in tours:
        tour.setdefault("theme", "detective")
        tour.setdefault("cover_image", None)
    return tours, stops


def _v2_to_v3(tours: Records, stops: Records) -> tuple[Records, Records]:
    # v3 added failure thresholds, hint/skip toggles and info-only stops
    for stop in stops:
        if stop.get("failures_allowed") is None:
            stop["failures_allowed"] = 2
        stop.setdefault("auto_show_hint", True)
        stop.setdefault("enable_skip", True)
        stop.setdefault("is_info_only", False)
        stop["options"] = list(stop.get("options") or [])
    return tours, stops


# from_version -> (to_version, step)
MIGRATIONS: dict[str, tuple[str, Step]] = {
    "1": ("2", _v1_to_v2),
    "2": ("3", _v2_to_v3),
}


def migration_path(from_version: str | None, to_version: str) -> list[tuple[str, Step]]:
    """Return the ordered steps from ``from_version`` up to ``to_version``."""
    path = []
    version = from_version
    while version != to_version:
        if version not in MIGRATIONS:
            raise UnknownVersionError(f"no migration from data version {from_version!r} to {to_version!r}")
        version, step = MIGRATIONS[version]
        path.append((version, step))
    return path


def migrate(tours: Records, stops: Records, from_version: str | None, to_version: str) -> tuple[Records, Records]:
    for _, step in migration_path(from_version, to_version):
        tours, stops = step(tours, stops)
    return tours, stops
