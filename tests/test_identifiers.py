"""
Tests for subject identifier generation.
"""

import time

from tripledoc.identifiers import generate_identifier


def test_digits_only():
    assert generate_identifier().isdigit()


def test_starts_with_millisecond_timestamp():
    before = int(time.time() * 1000)
    identifier = generate_identifier()
    after = int(time.time() * 1000)
    assert before <= int(identifier[:len(str(after))]) <= after


def test_sorted_chronologically():
    first = generate_identifier()
    time.sleep(0.01)
    second = generate_identifier()
    assert first < second


def test_unlikely_to_collide():
    identifiers = {generate_identifier() for _ in range(1000)}
    assert len(identifiers) == 1000
