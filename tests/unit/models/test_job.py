"""Tests for job models."""

import pytest

from verifyforge.models.job import Mode, Target


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("standard", Mode.STANDARD),
        ("economy", Mode.ECONOMY),
        ("ULTRA_ECONOMY", Mode.ULTRA_ECONOMY),
        (None, Mode.STANDARD),
        ("cheap", Mode.STANDARD),
    ],
)
def test_mode_parse(value: str | None, expected: Mode) -> None:
    """Parses modes leniently."""
    assert Mode.parse(value) is expected


def test_target_describe_prefers_url() -> None:
    """URL wins over filename."""
    assert Target(url="https://a.test", filename="a.zip").describe() == "https://a.test"
    assert Target(filename="a.zip").describe() == "a.zip"
    assert Target().describe() == "uploaded-file"


def test_target_repr_hides_content() -> None:
    """Uploaded bytes are kept out of the repr."""
    assert "secret" not in repr(Target(filename="a.txt", content=b"secret"))
