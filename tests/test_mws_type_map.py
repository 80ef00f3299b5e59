from datetime import datetime, timedelta, timezone

import pytest

from mws_client.services.mws_type_map import (
    FeedProcessingStatus,
    FeedType,
    UnknownTypeTagError,
    from_wire,
    to_wire,
)


@pytest.mark.parametrize("value", [True, False])
def test_boolean_round_trip(value):
    assert from_wire("boolean", to_wire("boolean", value)) is value


@pytest.mark.parametrize("value", [
    datetime(2009, 2, 20, 2, 10, 35, tzinfo=timezone.utc),
    datetime(2021, 7, 1, 23, 59, 59, 123456, tzinfo=timezone.utc),
    datetime(2015, 3, 4, 10, 0, 0, tzinfo=timezone(timedelta(hours=-8))),
])
def test_datetime_round_trip(value):
    assert from_wire("datetime", to_wire("datetime", value)) == value


def test_datetime_wire_form_is_utc_with_z_suffix():
    value = datetime(2009, 2, 20, 10, 10, 35, tzinfo=timezone(timedelta(hours=8)))
    assert to_wire("datetime", value) == "2009-02-20T02:10:35Z"


def test_naive_datetime_is_taken_as_utc():
    assert to_wire("datetime", datetime(2009, 2, 20, 2, 10, 35)) == "2009-02-20T02:10:35Z"


def test_datetime_from_wire_accepts_offsets():
    parsed = from_wire("datetime", "2009-02-20T02:10:35+00:00")
    assert parsed == datetime(2009, 2, 20, 2, 10, 35, tzinfo=timezone.utc)
    assert parsed.tzinfo is not None


@pytest.mark.parametrize("tag, value", [
    ("boolean", "true"),
    ("boolean", 1),
    ("nonNegativeInteger", -1),
    ("nonNegativeInteger", True),
    ("nonNegativeInteger", "10"),
    ("datetime", "2009-02-20"),
    ("string", 42),
    ("FeedProcessingStatus", "_NOT_A_STATUS_"),
])
def test_to_wire_rejects_bad_values(tag, value):
    with pytest.raises(ValueError):
        to_wire(tag, value)


@pytest.mark.parametrize("tag, text", [
    ("boolean", "yes"),
    ("nonNegativeInteger", "-3"),
    ("nonNegativeInteger", "abc"),
    ("datetime", "20th of February"),
    ("FeedProcessingStatus", "_SOMETHING_ELSE_"),
])
def test_from_wire_rejects_malformed_text(tag, text):
    with pytest.raises(ValueError):
        from_wire(tag, text)


def test_enumerations_accept_members_and_values():
    assert to_wire("FeedType", FeedType.POST_PRODUCT_DATA) == "_POST_PRODUCT_DATA_"
    assert to_wire("FeedType", "_POST_PRODUCT_DATA_") == "_POST_PRODUCT_DATA_"
    assert from_wire("FeedProcessingStatus", "_DONE_") is FeedProcessingStatus.DONE


def test_string_accepts_enum_members():
    assert to_wire("string", FeedType.POST_ITEM_DATA) == "_POST_ITEM_DATA_"


def test_http_body_is_encoded_to_bytes():
    assert to_wire("HTTP-BODY", "<xml/>") == b"<xml/>"
    assert to_wire("HTTP-BODY", b"\x00raw") == b"\x00raw"


def test_non_negative_integer_round_trip():
    assert to_wire("nonNegativeInteger", 0) == "0"
    assert from_wire("nonNegativeInteger", "25") == 25


def test_unknown_type_tag():
    with pytest.raises(UnknownTypeTagError):
        to_wire("float", 1.5)
    with pytest.raises(KeyError):
        from_wire("float", "1.5")
