import random

import pytest

from app.errors import Conflict
from app.services.numbers import STUDENT_PREFIX, generate_number


class Digits:
    """Deterministic stand-in for ``random`` that records the ranges asked for."""

    def __init__(self):
        self.ranges = []

    def randint(self, low, high):
        self.ranges.append((low, high))
        return low


def test_number_format():
    number = generate_number(STUDENT_PREFIX, lambda n: False, year=2024, rng=random.Random(1))
    assert number.startswith("STU2024")
    assert len(number) == len("STU2024") + 4
    assert number[7:].isdigit()


def test_falls_back_to_wider_suffix():
    rng = Digits()
    taken = {"STU20241000"}
    number = generate_number("STU", taken.__contains__, attempts=3, year=2024, rng=rng)
    assert number == "STU202410000000"
    assert rng.ranges[:3] == [(1000, 9999)] * 3
    assert rng.ranges[3] == (10_000_000, 99_999_999)


def test_gives_up_with_conflict():
    rng = Digits()
    with pytest.raises(Conflict):
        generate_number("TCH", lambda n: True, attempts=5, year=2024, rng=rng)
    assert len(rng.ranges) == 10


def test_registration_replaces_taken_student_number(seed, ctx):
    from app.services import accounts
    user = accounts.register(email="new@example.com", password="secret1",
                             confirm_password="secret1", first_name="New", last_name="One",
                             role="student", student_no="STU20240001")
    assert user.student.student_no != "STU20240001"
    assert user.student.student_no.startswith("STU")
