"""Player routes: lobby, play session actions, certificate.

One runner per (visitor cookie, tour). Runners live in memory and start
over in ``intro`` after a server restart.
"""
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException

from app.routers.deps import get_or_create_session_id, get_play_registry, get_store
from app.schemas.play import (
    AnswerOutSchema,
    AnswerSubmitSchema,
    CertificateOutSchema,
    CertificateRequestSchema,
    NextStopSchema,
    NotificationSchema,
    PlaySessionOutSchema,
    StopViewSchema,
)
from app.schemas.tour import Tour
from app.services.player import AnswerOutcome, PlayRunner, PlaySessionRegistry, PlayState
from app.services.tour_store import TourStore

router = APIRouter(prefix="/api/play", tags=["play"])

Store = Annotated[TourStore, Depends(get_store)]
Registry = Annotated[PlaySessionRegistry, Depends(get_play_registry)]
SessionId = Annotated[str, Depends(get_or_create_session_id)]


def maps_directions_url(address: str) -> str | None:
    if not address:
        return None
    return f"https://www.google.com/maps/dir/?api=1&destination={quote(address, safe='')}"


async def get_playable_tour(tour_id: str, store: Store) -> Tour:
    tour = await store.get_tour(tour_id)
    if tour is None or not tour.is_active:
        raise HTTPException(status_code=404, detail="Tour not found")
    return tour


async def new_runner(store: TourStore, tour: Tour) -> PlayRunner:
    return PlayRunner(tour, await store.list_stops(tour.id))


async def get_runner(
    tour: Annotated[Tour, Depends(get_playable_tour)],
    store: Store,
    registry: Registry,
    session_id: SessionId,
) -> PlayRunner:
    runner = registry.get(session_id, tour.id)
    if runner is None:
        runner = await new_runner(store, tour)
        registry.put(session_id, runner)
    return runner


Runner = Annotated[PlayRunner, Depends(get_runner)]


def session_view(runner: PlayRunner) -> PlaySessionOutSchema:
    session = runner.session
    stop = runner.current_stop
    next_stop = None
    if runner.state == PlayState.TRANSITION and runner.next_stop is not None:
        upcoming = runner.next_stop
        next_stop = NextStopSchema(
            name=upcoming.name,
            address=upcoming.address,
            maps_url=maps_directions_url(upcoming.address),
        )
    show_stop = stop is not None and runner.state in (PlayState.PLAYING, PlayState.TRANSITION)
    return PlaySessionOutSchema(
        tour_id=runner.tour.id,
        tour_name=runner.tour.name,
        tour_description=runner.tour.description,
        state=session.state,
        stop_index=session.current_stop_index,
        stop_count=len(runner.stops),
        failed_attempts=session.failed_attempts,
        can_skip=runner.can_skip,
        hint_visible=session.hint_visible,
        tips=list(stop.tips) if stop is not None and session.hint_visible else [],
        current_stop=StopViewSchema.model_validate(stop) if show_stop else None,
        next_stop=next_stop,
    )


def outcome_view(runner: PlayRunner, outcome: AnswerOutcome) -> AnswerOutSchema:
    return AnswerOutSchema(
        correct=outcome.correct,
        skipped=outcome.skipped,
        notifications=[NotificationSchema.model_validate(n) for n in outcome.notifications],
        session=session_view(runner),
    )


@router.get("/tours", response_model=list[Tour])
async def lobby(store: Store):
    """Active tours a player can pick from."""
    return await store.list_active_tours()


@router.get("/{tour_id}", response_model=PlaySessionOutSchema)
async def get_session(runner: Runner):
    return session_view(runner)


@router.post("/{tour_id}/start", response_model=PlaySessionOutSchema)
async def start(runner: Runner):
    runner.start()
    return session_view(runner)


@router.post("/{tour_id}/answer", response_model=AnswerOutSchema)
async def submit_answer(body: AnswerSubmitSchema, runner: Runner):
    """Check an answer for the current stop. A wrong answer is a 200 with correct=false."""
    outcome = runner.submit_answer(body.answer)
    return outcome_view(runner, outcome)


@router.post("/{tour_id}/skip", response_model=AnswerOutSchema)
async def skip(runner: Runner):
    outcome = runner.skip()
    return outcome_view(runner, outcome)


@router.post("/{tour_id}/advance", response_model=PlaySessionOutSchema)
async def advance(runner: Runner):
    runner.advance()
    return session_view(runner)


@router.post("/{tour_id}/hint", response_model=PlaySessionOutSchema)
async def toggle_hint(runner: Runner):
    runner.toggle_hint()
    return session_view(runner)


@router.post("/{tour_id}/restart", response_model=PlaySessionOutSchema)
async def restart(
    tour: Annotated[Tour, Depends(get_playable_tour)],
    store: Store,
    registry: Registry,
    session_id: SessionId,
):
    """Throw the session away and start over from intro with the tour's current stops."""
    runner = await new_runner(store, tour)
    registry.put(session_id, runner)
    return session_view(runner)


@router.post("/{tour_id}/certificate", response_model=CertificateOutSchema)
async def certificate(body: CertificateRequestSchema, runner: Runner):
    return CertificateOutSchema.model_validate(runner.issue_certificate(body.name))
