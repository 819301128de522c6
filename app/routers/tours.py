"""Admin routes: tour and stop CRUD, dashboard stats."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from app.routers.deps import get_store
from app.schemas.stop import Stop, StopCreate, StopDraft, StopOrderSchema, StopUpdate
from app.schemas.sync import DashboardStatsSchema
from app.schemas.tour import Tour, TourCreate, TourUpdate
from app.services.tour_store import TourStore

router = APIRouter(prefix="/api", tags=["admin"])

Store = Annotated[TourStore, Depends(get_store)]


async def _require_tour(store: TourStore, tour_id: str) -> Tour:
    tour = await store.get_tour(tour_id)
    if tour is None:
        raise HTTPException(status_code=404, detail="Tour not found")
    return tour


# ---------- tours ----------

@router.get("/tours", response_model=list[Tour])
async def list_tours(store: Store):
    """All tours, newest first."""
    return await store.list_tours()


@router.post("/tours", response_model=Tour, status_code=201)
async def create_tour(body: TourCreate, store: Store):
    return await store.create_tour(body)


@router.get("/tours/{tour_id}", response_model=Tour)
async def get_tour(tour_id: str, store: Store):
    return await _require_tour(store, tour_id)


@router.patch("/tours/{tour_id}", response_model=Tour)
async def update_tour(tour_id: str, body: TourUpdate, store: Store):
    tour = await store.update_tour(tour_id, body)
    if tour is None:
        raise HTTPException(status_code=404, detail="Tour not found")
    return tour


@router.delete("/tours/{tour_id}", status_code=204)
async def delete_tour(tour_id: str, store: Store):
    """Delete a tour together with all of its stops."""
    if not await store.delete_tour(tour_id):
        raise HTTPException(status_code=404, detail="Tour not found")


@router.post("/tours/{tour_id}/duplicate", response_model=Tour, status_code=201)
async def duplicate_tour(tour_id: str, store: Store):
    tour = await store.duplicate_tour(tour_id)
    if tour is None:
        raise HTTPException(status_code=404, detail="Tour not found")
    return tour


# ---------- stops of a tour ----------

@router.get("/tours/{tour_id}/stops", response_model=list[Stop])
async def list_tour_stops(tour_id: str, store: Store):
    await _require_tour(store, tour_id)
    return await store.list_stops(tour_id)


@router.post("/tours/{tour_id}/stops", response_model=Stop, status_code=201)
async def append_stop(tour_id: str, body: StopDraft, store: Store):
    """Add a stop at the end of the tour."""
    stop = await store.append_stop(tour_id, body)
    if stop is None:
        raise HTTPException(status_code=404, detail="Tour not found")
    return stop


@router.put("/tours/{tour_id}/stops/order", response_model=list[Stop])
async def reorder_stops(tour_id: str, body: StopOrderSchema, store: Store):
    await _require_tour(store, tour_id)
    return await store.reorder_stops(tour_id, body.stop_ids)


# ---------- single stops ----------

@router.post("/stops", response_model=Stop, status_code=201)
async def create_stop(body: StopCreate, store: Store):
    return await store.create_stop(body)


@router.get("/stops/{stop_id}", response_model=Stop)
async def get_stop(stop_id: str, store: Store):
    stop = await store.get_stop(stop_id)
    if stop is None:
        raise HTTPException(status_code=404, detail="Stop not found")
    return stop


@router.patch("/stops/{stop_id}", response_model=Stop)
async def update_stop(stop_id: str, body: StopUpdate, store: Store):
    stop = await store.update_stop(stop_id, body)
    if stop is None:
        raise HTTPException(status_code=404, detail="Stop not found")
    return stop


@router.delete("/stops/{stop_id}", status_code=204)
async def delete_stop(stop_id: str, store: Store):
    if not await store.delete_stop(stop_id):
        raise HTTPException(status_code=404, detail="Stop not found")


# ---------- dashboard ----------

@router.get("/dashboard/stats", response_model=DashboardStatsSchema)
async def dashboard_stats(store: Store):
    return await store.stats()
