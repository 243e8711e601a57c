import datetime

import pytest

from gprmc_emulator.time_source import TimeSpecError, parse_time_spec

NOW = datetime.datetime(2026, 10, 16, 8, 9, 10, 123456, tzinfo=datetime.timezone.utc)


def test_now_uses_live_clock_without_subseconds():
    spec = parse_time_spec("now")

    assert spec.is_live
    assert spec.resolve(NOW) == NOW.replace(microsecond=0)


def test_now_is_case_insensitive_and_trimmed():
    assert parse_time_spec("  NOW ").is_live


def test_time_of_day_keeps_current_date():
    spec = parse_time_spec("12:35:19")
    resolved = spec.resolve(NOW)

    assert not spec.is_live
    assert (resolved.hour, resolved.minute, resolved.second) == (12, 35, 19)
    assert resolved.date() == NOW.date()


def test_time_of_day_without_seconds():
    resolved = parse_time_spec("06:30").resolve(NOW)
    assert (resolved.hour, resolved.minute, resolved.second) == (6, 30, 0)


def test_fixed_time_is_reused_on_every_call():
    spec = parse_time_spec("12:35:19")
    later = NOW + datetime.timedelta(seconds=5)
    assert spec.resolve(NOW) == spec.resolve(later)


@pytest.mark.parametrize(
    "text",
    ["1994-03-23 12:35:19", "1994-03-23T12:35:19", "23/03/1994 12:35:19"],
)
def test_date_and_time_are_used_verbatim(text):
    resolved = parse_time_spec(text).resolve(NOW)
    assert resolved == datetime.datetime(1994, 3, 23, 12, 35, 19)


@pytest.mark.parametrize("text", ["", "tomorrow", "25:00:00", "12:60", "1994-02-30 12:00:00", "12:35:19.5"])
def test_malformed_specs_are_rejected(text):
    with pytest.raises(TimeSpecError):
        parse_time_spec(text)


def test_time_spec_error_is_value_error():
    assert issubclass(TimeSpecError, ValueError)
