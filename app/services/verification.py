"""Answer checks, one per verification type."""
from collections.abc import Callable

from app.schemas.stop import Stop, VerificationType

Verifier = Callable[[Stop, "str | None"], bool]


def normalize_text(value: str | None) -> str:
    return (value or "").strip().casefold()


def verify_text(stop: Stop, answer: str | None) -> bool:
    """Password match ignoring case and surrounding whitespace."""
    return normalize_text(answer) == normalize_text(stop.password)


def verify_multiple_choice(stop: Stop, answer: str | None) -> bool:
    """Selected option must be exactly the correct answer."""
    return answer is not None and answer == stop.correct_answer


def confirm_on_site(stop: Stop, answer: str | None) -> bool:
    """GPS and photo stops are player-confirmed ("I'm here").

    No geofence against gps_lat/gps_lng/gps_radius and no image check is
    performed; any submission passes.
    """
    return True


VERIFIERS: dict[VerificationType, Verifier] = {
    VerificationType.TEXT: verify_text,
    VerificationType.MULTIPLE_CHOICE: verify_multiple_choice,
    VerificationType.GPS: confirm_on_site,
    VerificationType.PHOTO: confirm_on_site,
}


def verify(stop: Stop, answer: str | None) -> bool:
    if stop.is_info_only:
        return True
    return VERIFIERS[stop.verification_type](stop, answer)
