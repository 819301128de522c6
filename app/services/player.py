"""Play runner: walks one player through a tour's stops.

State flow::

    intro --start--> playing --correct/skip--> transition --advance--> playing
                        |                                               ...
                        +--correct/skip on last stop--> completed

A wrong answer keeps the runner in ``playing`` and bumps the failure count for
the current stop. Session state is in memory only and is never written back to
the tour store.
"""
from __future__ import annotations

import secrets
import string
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from app.schemas.stop import Stop
from app.schemas.tour import Tour
from app.services.verification import verify

DEFAULT_AGENT_NAME = "Mystery Agent"
CREDENTIAL_PREFIX = "MS-"


class PlayState(str, Enum):
    INTRO = "intro"
    PLAYING = "playing"
    TRANSITION = "transition"
    COMPLETED = "completed"


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    HINT = "hint"
    SKIP_AVAILABLE = "skip_available"


class InvalidTransitionError(Exception):
    """Action not allowed in the runner's current state."""


@dataclass
class Notification:
    kind: NotificationKind
    message: str


@dataclass
class PlaySession:
    """Ephemeral progress through one tour."""

    tour_id: str
    state: PlayState = PlayState.INTRO
    current_stop_index: int = 0
    failed_attempts: int = 0
    pending_input: str = ""
    hint_visible: bool = False
    credential_id: str | None = None


@dataclass
class AnswerOutcome:
    correct: bool
    state: PlayState
    skipped: bool = False
    notifications: list[Notification] = field(default_factory=list)


@dataclass
class Certificate:
    agent_name: str
    tour_name: str
    issued_on: date
    credential_id: str


def new_credential_id() -> str:
    alphabet = string.ascii_uppercase + string.digits
    return CREDENTIAL_PREFIX + "".join(secrets.choice(alphabet) for _ in range(8))


class PlayRunner:
    def __init__(self, tour: Tour, stops: list[Stop]):
        self.tour = tour
        self.stops = sorted(stops, key=lambda s: s.stop_number)
        self.session = PlaySession(tour_id=tour.id)

    # ---------- derived state ----------

    @property
    def state(self) -> PlayState:
        return self.session.state

    @property
    def current_stop(self) -> Stop | None:
        index = self.session.current_stop_index
        return self.stops[index] if index < len(self.stops) else None

    @property
    def next_stop(self) -> Stop | None:
        index = self.session.current_stop_index + 1
        return self.stops[index] if index < len(self.stops) else None

    @property
    def is_last_stop(self) -> bool:
        return self.session.current_stop_index >= len(self.stops) - 1

    @property
    def can_skip(self) -> bool:
        stop = self.current_stop
        if self.state != PlayState.PLAYING or stop is None or stop.is_info_only:
            return False
        # failures_allowed=0 offers skip as soon as the stop opens; it is not read as "use the default"
        return stop.enable_skip is not False and self.session.failed_attempts >= stop.failures_allowed

    # ---------- transitions ----------

    def start(self) -> None:
        self._expect(PlayState.INTRO, "start")
        if not self.stops:
            raise InvalidTransitionError("tour has no stops")
        self.session.state = PlayState.PLAYING

    def select(self, value: str) -> None:
        """Remember typed text or the chosen option until it's submitted."""
        self._expect(PlayState.PLAYING, "select")
        self.session.pending_input = value

    def submit_answer(self, answer: str | None = None) -> AnswerOutcome:
        self._expect(PlayState.PLAYING, "submit an answer")
        if answer is None:
            answer = self.session.pending_input
        else:
            self.session.pending_input = answer
        if verify(self.current_stop, answer):
            return self._succeed()
        return self._fail()

    def skip(self) -> AnswerOutcome:
        if not self.can_skip:
            raise InvalidTransitionError("skip is not available for this stop")
        outcome = self._succeed()
        outcome.skipped = True
        outcome.notifications.insert(0, Notification(NotificationKind.INFO, "Skipping stop..."))
        return outcome

    def advance(self) -> None:
        """Leave the transition screen for the next stop."""
        self._expect(PlayState.TRANSITION, "advance")
        self.session.current_stop_index += 1
        self.session.state = PlayState.PLAYING
        self._reset_stop_progress()

    def restart(self) -> None:
        self.session = PlaySession(tour_id=self.tour.id)

    # ---------- hints ----------

    def show_hint(self) -> list[str]:
        self._expect(PlayState.PLAYING, "show a hint")
        self.session.hint_visible = True
        return list(self.current_stop.tips)

    def hide_hint(self) -> None:
        self.session.hint_visible = False

    def toggle_hint(self) -> bool:
        if self.session.hint_visible:
            self.hide_hint()
        else:
            self.show_hint()
        return self.session.hint_visible

    # ---------- completion ----------

    def issue_certificate(self, agent_name: str | None = None) -> Certificate:
        self._expect(PlayState.COMPLETED, "issue a certificate")
        if self.session.credential_id is None:
            self.session.credential_id = new_credential_id()
        return Certificate(
            agent_name=(agent_name or "").strip() or DEFAULT_AGENT_NAME,
            tour_name=self.tour.name,
            issued_on=date.today(),
            credential_id=self.session.credential_id,
        )

    # ---------- internals ----------

    def _succeed(self) -> AnswerOutcome:
        self.session.state = PlayState.COMPLETED if self.is_last_stop else PlayState.TRANSITION
        self._reset_stop_progress()
        return AnswerOutcome(
            correct=True,
            state=self.session.state,
            notifications=[Notification(NotificationKind.SUCCESS, "Correct!")],
        )

    def _fail(self) -> AnswerOutcome:
        stop = self.current_stop
        self.session.failed_attempts += 1
        attempts = self.session.failed_attempts
        notes = [Notification(NotificationKind.ERROR, "Incorrect, try again.")]
        if attempts == 1 and stop.auto_show_hint is not False and stop.tips:
            notes.append(Notification(NotificationKind.HINT, "Need a hint? Check the tips for this stop."))
        if self.can_skip:
            notes.append(Notification(NotificationKind.SKIP_AVAILABLE, "Stuck? You can now skip this stop."))
        return AnswerOutcome(correct=False, state=self.session.state, notifications=notes)

    def _reset_stop_progress(self) -> None:
        self.session.failed_attempts = 0
        self.session.pending_input = ""
        self.session.hint_visible = False

    def _expect(self, state: PlayState, action: str) -> None:
        if self.session.state != state:
            raise InvalidTransitionError(f"cannot {action} while {self.session.state.value}")


class PlaySessionRegistry:
    """In-memory runners keyed by (visitor session id, tour id). Oldest evicted first."""

    def __init__(self, max_sessions: int = 10_000):
        self.max_sessions = max_sessions
        self._runners: OrderedDict[tuple[str, str], PlayRunner] = OrderedDict()

    def get(self, session_id: str, tour_id: str) -> PlayRunner | None:
        key = (session_id, tour_id)
        runner = self._runners.get(key)
        if runner is not None:
            self._runners.move_to_end(key)
        return runner

    def put(self, session_id: str, runner: PlayRunner) -> None:
        key = (session_id, runner.tour.id)
        self._runners[key] = runner
        self._runners.move_to_end(key)
        while len(self._runners) > self.max_sessions:
            self._runners.popitem(last=False)

    def __len__(self) -> int:
        return len(self._runners)
