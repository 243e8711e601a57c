import datetime

from gprmc_emulator.utils import (
    build_payload,
    build_sentence,
    calculate_checksum,
    format_nmea_date,
    format_nmea_time,
    verify_sentence,
)

DEFAULT_POSITION = "5220.531,N,00011.797,E"


def _timestamp(*args) -> datetime.datetime:
    return datetime.datetime(*args)


def test_checksum_matches_reference_sentence():
    payload = "GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W"
    assert calculate_checksum(payload) == "6a"


def test_checksum_is_zero_padded_lowercase():
    # 'A' (0x41) ^ 'K' (0x4b) == 0x0a
    assert calculate_checksum("AK") == "0a"
    assert calculate_checksum("") == "00"


def test_time_and_date_fields_are_zero_padded():
    ts = _timestamp(2001, 2, 3, 4, 5, 6, 987654)
    assert format_nmea_time(ts) == "040506.000"
    assert format_nmea_date(ts) == "030201"


def test_concrete_scenario_sentence():
    ts = _timestamp(1994, 3, 23, 12, 35, 19)
    position = "4807.038,N,01131.000,E"

    assert build_payload(ts, position) == "GPRMC,123519.000,A,4807.038,N,01131.000,E,0.0,0.0,230394,,A"
    assert build_sentence(ts, position) == (
        "$GPRMC,123519.000,A,4807.038,N,01131.000,E,0.0,0.0,230394,,A*42\r\n"
    )


def test_default_position_is_copied_verbatim():
    ts = _timestamp(2026, 10, 16, 8, 9, 10)
    sentence = build_sentence(ts, DEFAULT_POSITION)

    assert sentence == "$GPRMC,080910.000,A,5220.531,N,00011.797,E,0.0,0.0,161026,,A*4b\r\n"
    assert ",5220.531,N,00011.797,E," in sentence


def test_frame_is_well_formed_across_day_boundaries():
    for ts in (_timestamp(2000, 1, 1, 0, 0, 0), _timestamp(2099, 12, 31, 23, 59, 59)):
        sentence = build_sentence(ts, DEFAULT_POSITION)
        assert sentence.startswith("$GPRMC,")
        assert sentence.endswith("\r\n")
        assert sentence.count("*") == 1
        assert len(sentence.rstrip("\r\n").split("*")[1]) == 2
        assert verify_sentence(sentence)


def test_build_sentence_is_deterministic():
    ts = _timestamp(1994, 3, 23, 12, 35, 19)
    assert build_sentence(ts, DEFAULT_POSITION) == build_sentence(ts, DEFAULT_POSITION)


def test_verify_sentence_detects_corruption():
    sentence = build_sentence(_timestamp(1994, 3, 23, 12, 35, 19), DEFAULT_POSITION)
    corrupted = sentence.replace("5220.531", "5220.532")

    assert verify_sentence(sentence)
    assert not verify_sentence(corrupted)
    assert not verify_sentence("GPRMC,no,frame")
