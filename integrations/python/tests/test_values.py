from datetime import datetime, timedelta, timezone

import pytest

from voicehook_core import EndpointParser, RequestValues


def test_call_duration():
    assert RequestValues({"CallDuration": "12"}).call_duration() == timedelta(seconds=12)
    assert RequestValues({}).call_duration() == timedelta(0)


def test_call_duration_rejects_garbage():
    with pytest.raises(ValueError, match="CallDuration"):
        RequestValues({"CallDuration": "11 sec"}).call_duration()


def test_sequence_number():
    assert RequestValues({"SequenceNumber": "3"}).sequence_number() == 3
    assert RequestValues({"SequenceNumber": ""}).sequence_number() == 0
    with pytest.raises(ValueError):
        RequestValues({"SequenceNumber": "three"}).sequence_number()


def test_timestamp_parses_rfc1123_with_zone():
    values = RequestValues({"Timestamp": "Tue, 08 Oct 2024 14:03:11 +0000"})
    assert values.timestamp_or_now() == datetime(2024, 10, 8, 14, 3, 11, tzinfo=timezone.utc)


def test_timestamp_falls_back_to_now():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert RequestValues({"Timestamp": "yesterday"}).timestamp_or_now(now=now) == now
    assert RequestValues({}).timestamp_or_now(now=now) == now
    assert RequestValues({}).timestamp_or_now().tzinfo is not None


def test_endpoints_use_configured_parser():
    values = RequestValues(
        {"From": "sip:8005642365@acme.voice.eu1.example.com", "To": "+18005642365"},
        parser=EndpointParser(domain_suffix="example.com", routing_marker="voice"),
    )
    assert values.from_endpoint().routing_domain == "acme"
    assert values.to_endpoint().is_routing_uri is False
    assert values.to_endpoint().valid is True


def test_missing_endpoint_is_invalid():
    assert RequestValues({}).from_endpoint().valid is False


def test_values_are_read_only():
    source = {"CallSid": "CA1"}
    values = RequestValues(source)
    source["CallSid"] = "changed"

    assert values["CallSid"] == "CA1"
    assert values == {"CallSid": "CA1"}
    with pytest.raises(TypeError):
        values["CallSid"] = "other"
