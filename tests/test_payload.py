"""Tests for rule payload unmarshalling."""

import pytest

from sqlreview.payload import (
    unmarshal_naming_payload,
    unmarshal_number_payload,
    unmarshal_string_list_payload,
)


def test_number_payload():
    assert unmarshal_number_payload({"number": 5}).number == 5
    assert unmarshal_number_payload({"number": 5.0}).number == 5


@pytest.mark.parametrize("payload", [{"number": "5"}, {"number": True}, {"number": None}])
def test_number_payload_rejects_other_types(payload):
    with pytest.raises(ValueError, match="invalid number type"):
        unmarshal_number_payload(payload)


def test_missing_payload_and_field():
    with pytest.raises(ValueError, match="payload is nil"):
        unmarshal_number_payload(None)
    with pytest.raises(ValueError, match="missing 'number' field"):
        unmarshal_number_payload({})


def test_string_list_payload():
    assert unmarshal_string_list_payload({"list": ["a", "b"]}).list == ["a", "b"]
    assert unmarshal_string_list_payload({"list": None}).list == []
    with pytest.raises(ValueError, match="not an array"):
        unmarshal_string_list_payload({"list": "a"})
    with pytest.raises(ValueError, match="non-string item"):
        unmarshal_string_list_payload({"list": ["a", 1]})


def test_naming_payload():
    payload = unmarshal_naming_payload({"format": "^[a-z]+$", "maxLength": 10})

    assert payload.format == "^[a-z]+$"
    assert payload.max_length == 10
    assert payload.compile().search("orders")


def test_naming_payload_max_length_is_optional():
    assert unmarshal_naming_payload({"format": ".*"}).max_length == 0


def test_naming_payload_invalid_regex():
    payload = unmarshal_naming_payload({"format": "(["})

    with pytest.raises(ValueError, match="failed to compile regular expression"):
        payload.compile()
