"""
Tests for log2mqtt.schemas: message resolution and envelope construction.
"""

import json
import re
import uuid

import pytest

from log2mqtt.schemas import (
    NO_ARGS,
    Envelope,
    IdentityTags,
    LogCall,
    Severity,
    Timestamp,
    build_envelope,
    resolve_message,
)

RFC3339 = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}$")


def test_resolve_without_arguments_is_verbatim():
    """No arguments: template is used as-is, '%' included."""
    assert resolve_message("100% done") == "100% done"
    assert resolve_message("hello %s", ()) == "hello %s"


def test_resolve_with_no_args_marker_is_verbatim():
    assert resolve_message("50%s", (NO_ARGS,)) == "50%s"
    assert resolve_message("%s and %s", (NO_ARGS, "ignored")) == "%s and %s"


def test_resolve_interpolates_positionally():
    assert resolve_message("charged %d cards for %s", (3, "acme")) == "charged 3 cards for acme"


def test_resolve_falls_back_on_format_error():
    """Mismatched templates degrade to the verbatim text."""
    assert resolve_message("%d cards", ("three",)) == "%d cards"
    assert resolve_message("%s %s", ("only one",)) == "%s %s"
    assert resolve_message("no placeholders", (1,)) == "no placeholders"


def test_resolve_none_is_a_regular_argument():
    assert resolve_message("value: %s", (None,)) == "value: None"


def test_log_call_arguments_are_a_tuple():
    call = LogCall("x %s", Severity.INFO, ["a"])
    assert call.arguments == ("a",)


def test_severity_wire_values():
    assert Severity.TRACE.value == "debug"
    assert Severity.INFO.value == "info"
    assert Severity.ERROR.value == "error"


def test_identity_requires_hostname_and_application():
    with pytest.raises(ValueError):
        IdentityTags(hostname="", application="billing")
    with pytest.raises(ValueError):
        IdentityTags(hostname="10.0.0.7", application="")


def test_identity_extra_is_read_only_copy():
    extra = {"region": "us"}
    identity = IdentityTags(hostname="h", application="a", extra=extra)
    extra["region"] = "eu"

    assert identity.extra["region"] == "us"
    with pytest.raises(TypeError):
        identity.extra["region"] = "eu"


def test_extra_tags_override_core_tags():
    identity = IdentityTags(hostname="h", application="a", extra={"hostname": "override"})
    assert identity.as_dict() == {"hostname": "override", "application": "a"}


def test_build_envelope_fields(identity):
    envelope = build_envelope(identity, "started")

    assert envelope.message == "started"
    assert envelope.severity is None
    assert dict(envelope.tags) == {"hostname": "10.0.0.7", "application": "billing", "region": "us"}
    assert uuid.UUID(envelope.uuid).version == 4
    assert RFC3339.match(envelope.timestamp.value)


def test_with_severity_returns_new_envelope(identity):
    envelope = build_envelope(identity, "started")
    tagged = envelope.with_severity(Severity.ERROR)

    assert envelope.severity is None
    assert tagged.severity is Severity.ERROR
    assert tagged.uuid == envelope.uuid


def test_envelopes_do_not_share_state(identity):
    first = build_envelope(identity, "one")
    second = build_envelope(identity, "two")

    assert first.uuid != second.uuid
    assert first.tags is not second.tags

    wire = first.to_dict()
    wire["data"]["region"] = "eu"
    assert first.tags["region"] == "us"
    assert identity.extra["region"] == "us"


def test_unique_ids_across_many_envelopes(identity):
    ids = {build_envelope(identity, "m").uuid for _ in range(2000)}
    assert len(ids) == 2000


def test_wire_format(identity):
    envelope = build_envelope(identity, "hello").with_severity(Severity.TRACE)
    data = envelope.to_dict()["data"]

    assert set(data) == {"hostname", "application", "region", "uuid", "msg", "timestamp", "severity"}
    assert data["msg"] == "hello"
    assert data["severity"] == "debug"
    assert data["region"] == "us"


def test_json_preserves_fields(identity):
    """Serialization keeps every field exactly; key order is free."""
    envelope = build_envelope(identity, "ünïcode ✓ \"quoted\"").with_severity(Severity.INFO)

    restored = Envelope.from_dict(json.loads(json.dumps(envelope.to_dict())))

    assert restored.to_dict() == envelope.to_dict()
    assert restored.severity is Severity.INFO
    assert dict(restored.tags) == dict(envelope.tags)


def test_from_dict_rejects_incomplete_payload():
    with pytest.raises(ValueError):
        Envelope.from_dict({"data": {"msg": "no uuid"}})
    with pytest.raises(ValueError):
        Envelope.from_dict({"data": {"uuid": "u", "msg": "m", "timestamp": "t", "severity": "fatal"}})


def test_timestamp_round_trip():
    ts = Timestamp.now()
    assert Timestamp.from_datetime(ts.to_datetime()) == ts

    with pytest.raises(ValueError):
        Timestamp("yesterday").to_datetime()


class _Unprintable:
    def __str__(self):
        raise RuntimeError("no text for you")


def test_resolve_falls_back_on_overflow_and_broken_arguments():
    """Arguments that blow up while formatting never escape resolution."""
    assert resolve_message("%d items", (float("inf"),)) == "%d items"
    assert resolve_message("%c", (0x110000,)) == "%c"
    assert resolve_message("value: %s", (_Unprintable(),)) == "value: %s"
