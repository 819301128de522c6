"""Sync routes: export/import the whole collection as a code, factory reset."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from app.routers.deps import get_store
from app.schemas.sync import SyncCodeSchema
from app.services.tour_store import TourStore

router = APIRouter(prefix="/api/sync", tags=["sync"])


@router.get("/export", response_model=SyncCodeSchema)
async def export_code(store: Annotated[TourStore, Depends(get_store)]):
    """Sync code to paste on another device."""
    return SyncCodeSchema(code=await store.export_snapshot())


@router.post("/import")
async def import_code(body: SyncCodeSchema, store: Annotated[TourStore, Depends(get_store)]):
    """Replace all tours and stops with the ones in the code."""
    if not await store.import_snapshot(body.code):
        raise HTTPException(status_code=400, detail="Invalid sync code")
    return {"ok": True}


@router.post("/reset")
async def factory_reset(store: Annotated[TourStore, Depends(get_store)]):
    await store.reset_to_factory()
    return {"ok": True}
