import asyncio
import base64
import json

import pytest

from app.schemas.stop import StopCreate
from app.schemas.tour import TourCreate
from app.services.seeding import DEMO_TOUR_ID
from app.services.snapshot import SnapshotError, decode_snapshot

from conftest import make_store

run = asyncio.run


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


_TOUR = '{"id": "t1", "name": "A", "created_at": "2026-01-01T00:00:00Z", "updated_at": "2026-01-01T00:00:00Z"}'
_STOP = '{"id": "s1", "tour_id": "t1", "stop_number": 1, "created_at": "2026-01-01T00:00:00Z"}'


def _state(store):
    tours = run(store.list_tours())
    stops = [s for t in tours for s in run(store.list_stops(t.id))]
    return [t.model_dump() for t in tours], sorted((s.model_dump() for s in stops), key=lambda s: s["id"])


def test_export_is_base64_json_of_tours_and_stops(store):
    code = run(store.export_snapshot())
    doc = json.loads(base64.b64decode(code))
    assert set(doc) == {"tours", "stops"}
    assert doc["tours"][0]["id"] == DEMO_TOUR_ID
    assert len(doc["stops"]) == 5


def test_export_import_round_trip(store):
    tour = run(store.create_tour(TourCreate(name="Café Crawl ☕", city="São Paulo")))
    run(store.create_stop(StopCreate(tour_id=tour.id, stop_number=1, options=["A", "B"], correct_answer="B")))
    before = _state(store)

    target = make_store()
    assert run(target.import_snapshot(run(store.export_snapshot()))) is True
    assert _state(target) == before


def test_import_replaces_everything(store):
    source = make_store()
    run(source.delete_tour(DEMO_TOUR_ID))
    only = run(source.create_tour(TourCreate(name="Only One")))

    assert run(store.import_snapshot(run(source.export_snapshot()))) is True
    assert [t.id for t in run(store.list_tours())] == [only.id]
    assert run(store.get_stop("stop-1")) is None


def test_import_accepts_line_wrapped_code(store):
    code = run(store.export_snapshot())
    wrapped = "\n".join(code[i:i + 60] for i in range(0, len(code), 60))
    assert run(make_store().import_snapshot(wrapped)) is True


@pytest.mark.parametrize(
    "blob",
    [
        "",
        "   ",
        "%%% not base64 %%%",
        _b64("not json at all"),
        _b64("[1, 2, 3]"),
        _b64('{"tours": []}'),
        _b64('{"stops": []}'),
        _b64('{"tours": "x", "stops": []}'),
        _b64('{"tours": [{"name": "no id"}], "stops": []}'),
        _b64('{"tours": [], "stops": [{"id": "s", "tour_id": "t", "stop_number": 1, '
             '"created_at": "2026-01-01T00:00:00Z", "verification_type": "telepathy"}]}'),
        _b64(f'{{"tours": [{_TOUR}, {_TOUR}], "stops": []}}'),
        _b64(f'{{"tours": [{_TOUR}], "stops": [{_STOP}, {_STOP}]}}'),
    ],
)
def test_bad_import_returns_false_and_leaves_state(store, storage, blob):
    before = _state(store)
    writes = storage.writes
    assert run(store.import_snapshot(blob)) is False
    assert _state(store) == before
    assert storage.writes == writes


def test_import_of_empty_collections_is_valid(store):
    assert run(store.import_snapshot(_b64('{"tours": [], "stops": []}'))) is True
    assert run(store.list_tours()) == []


def test_decode_snapshot_reports_reason():
    with pytest.raises(SnapshotError):
        decode_snapshot(_b64("{"))


def test_import_with_repeated_demo_tour_is_rejected(store):
    doc = json.loads(base64.b64decode(run(store.export_snapshot())))
    doc["tours"].append(dict(doc["tours"][0], name="Impostor"))
    blob = _b64(json.dumps(doc))

    assert run(store.import_snapshot(blob)) is False
    assert [t.id for t in run(store.list_tours())] == [DEMO_TOUR_ID]
    assert run(store.get_tour(DEMO_TOUR_ID)).name == "The Sherlock Holmes Institute Final Exam"
