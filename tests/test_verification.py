import pytest

from app.schemas.stop import VerificationType
from app.services.verification import VERIFIERS, verify

from conftest import make_stop


@pytest.mark.parametrize(
    "answer, expected",
    [
        ("mystery", True),
        ("  MYSTERY ", True),
        ("Mystery", True),
        ("myst ery", False),
        ("", False),
        (None, False),
    ],
)
def test_text_answer_ignores_case_and_padding(answer, expected):
    stop = make_stop(1, password="mystery")
    assert verify(stop, answer) is expected


def test_text_stop_with_empty_password_accepts_blank_answer():
    stop = make_stop(1, password="")
    assert verify(stop, "  ") is True


@pytest.mark.parametrize(
    "answer, expected",
    [("Watson", True), ("watson", False), ("Watson ", False), ("Holmes", False), (None, False)],
)
def test_multiple_choice_is_exact(answer, expected):
    stop = make_stop(
        1,
        verification_type=VerificationType.MULTIPLE_CHOICE,
        options=["Holmes", "Watson"],
        correct_answer="Watson",
    )
    assert verify(stop, answer) is expected


def test_multiple_choice_without_correct_answer_never_passes():
    stop = make_stop(1, verification_type=VerificationType.MULTIPLE_CHOICE, options=["A"])
    assert verify(stop, "A") is False
    assert verify(stop, None) is False


@pytest.mark.parametrize("kind", [VerificationType.GPS, VerificationType.PHOTO])
def test_on_site_confirmation_always_passes(kind):
    stop = make_stop(1, verification_type=kind, gps_lat=1.0, gps_lng=2.0)
    assert verify(stop, None) is True
    assert verify(stop, "anything") is True


def test_info_only_stop_passes_whatever_the_type():
    stop = make_stop(1, is_info_only=True, password="secret")
    assert verify(stop, "wrong") is True


def test_every_verification_type_has_a_verifier():
    assert set(VERIFIERS) == set(VerificationType)
