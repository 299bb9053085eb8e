"""Tests for traceability id composition."""

import random
import re
from datetime import datetime, timezone

import pytest

from shamba_trace import compose_traceability_id, generate_tracking_number
from shamba_trace.traceability import from_base36, hash_fragment, to_base36

NOV_14_2023_MS = 1700000000000


def test_compose_known_value():
    """compose_traceability_id() should match the published format exactly."""
    result = compose_traceability_id("prod-1", "farmer-1", NOV_14_2023_MS)

    assert result == "S2S-LOYW3V28-207EE5-F4B0CC"


def test_compose_accepts_datetime():
    when = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    assert compose_traceability_id("prod-1", "farmer-1", when) == "S2S-LOYW3V28-207EE5-F4B0CC"


def test_compose_is_deterministic():
    first = compose_traceability_id("prod-1", "farmer-1", NOV_14_2023_MS)
    second = compose_traceability_id("prod-1", "farmer-1", NOV_14_2023_MS)

    assert first == second


@pytest.mark.parametrize(
    "product_id, farmer_id",
    [("prod-1", "farmer-1"), (42, 7), ("", ""), ("65f1c0ffee", "a b c")],
)
def test_compose_format_invariant(product_id, farmer_id):
    """Every id splits into four segments starting with S2S."""
    result = compose_traceability_id(product_id, farmer_id)

    segments = result.split("-")
    assert len(segments) == 4
    assert segments[0] == "S2S"
    assert re.fullmatch(r"[0-9A-F]{6}", segments[2])
    assert re.fullmatch(r"[0-9A-F]{6}", segments[3])
    assert result == result.upper()


def test_compose_hashes_empty_string():
    result = compose_traceability_id("", "", NOV_14_2023_MS)

    assert result == "S2S-LOYW3V28-D41D8C-D41D8C"


def test_compose_stringifies_keys():
    assert compose_traceability_id(42, 42, 0) == compose_traceability_id("42", "42", 0)
    assert hash_fragment(42) == "a1d0c6"


def test_compose_defaults_to_now(mocker):
    mocker.patch("shamba_trace.traceability.now_ms", return_value=NOV_14_2023_MS)

    assert compose_traceability_id("prod-1", "farmer-1").startswith("S2S-LOYW3V28-")


def test_base36_helpers():
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    assert to_base36(NOV_14_2023_MS) == "loyw3v28"
    assert from_base36("LOYW3V28") == NOV_14_2023_MS


def test_base36_rejects_negative():
    with pytest.raises(ValueError):
        to_base36(-1)


def test_tracking_number_format():
    result = generate_tracking_number(NOV_14_2023_MS, rng=random.Random(7))

    assert result.startswith("S2SLOYW3V28")
    assert len(result) == len("S2SLOYW3V28") + 4
    assert re.fullmatch(r"S2S[0-9A-Z]+", result)


def test_tracking_number_suffix_is_random():
    numbers = {generate_tracking_number(NOV_14_2023_MS) for _ in range(20)}

    assert len(numbers) > 1
