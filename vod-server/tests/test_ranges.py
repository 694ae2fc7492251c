import pytest

from vod.modules.streaming import MalformedRangeError, RangeNotSatisfiableError, parse_range_header


def test_closed_range():
    byte_range = parse_range_header("bytes=1000-1999", 1_048_576)
    assert (byte_range.start, byte_range.end, byte_range.size) == (1000, 1999, 1000)
    assert byte_range.end_explicit
    assert byte_range.content_range(1_048_576) == "bytes 1000-1999/1048576"


def test_open_ended_range_runs_to_last_byte():
    byte_range = parse_range_header("bytes=500-", 1000)
    assert (byte_range.start, byte_range.end) == (500, 999)
    assert not byte_range.end_explicit


def test_end_past_length_is_clamped():
    byte_range = parse_range_header("bytes=900-5000", 1000)
    assert byte_range.end == 999
    assert byte_range.size == 100


def test_single_byte_and_whole_blob():
    assert parse_range_header("bytes=0-0", 10).size == 1
    assert parse_range_header("bytes=0-", 10).size == 10


def test_whitespace_and_unit_case_are_tolerated():
    byte_range = parse_range_header("  Bytes = 10 - 19 ", 100)
    assert (byte_range.start, byte_range.end) == (10, 19)


@pytest.mark.parametrize(
    "header",
    [
        "bytes=abc-",
        "bytes=-500",
        "bytes=0-1,5-10",
        "items=0-10",
        "bytes=",
        "bytes=1-2-3",
        "0-100",
        "bytes=-",
    ],
)
def test_malformed_headers(header):
    with pytest.raises(MalformedRangeError):
        parse_range_header(header, 1000)


@pytest.mark.parametrize("header", ["bytes=1000-", "bytes=1000-1000", "bytes=5000-6000", "bytes=20-10"])
def test_unsatisfiable_ranges(header):
    with pytest.raises(RangeNotSatisfiableError) as excinfo:
        parse_range_header(header, 1000)
    assert excinfo.value.length == 1000


def test_any_range_on_empty_blob_is_unsatisfiable():
    with pytest.raises(RangeNotSatisfiableError):
        parse_range_header("bytes=0-", 0)
