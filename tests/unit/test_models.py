from __future__ import annotations

import pytest
from pydantic import ValidationError

from actionable_store.domain.models import Actionable, ActionableRecord, ActionableType

TIMESTAMP = 1_700_000_000_000


def _actionable(**overrides) -> Actionable:
    fields = dict(
        id="act-1",
        type=ActionableType.SET_STANDBY_BUCKET.value,
        description="Restrict background activity",
        package_name="com.example.social",
        estimated_battery_savings=12.5,
        severity=4,
        new_mode="restricted",
        parameters={"bucket": "RESTRICTED"},
    )
    fields.update(overrides)
    return Actionable(**fields)


def test_record_requires_timestamp_and_payload():
    with pytest.raises(ValidationError):
        ActionableRecord(timestamp=TIMESTAMP)
    with pytest.raises(ValidationError):
        ActionableRecord(payload="x")


def test_record_is_frozen():
    record = ActionableRecord(timestamp=TIMESTAMP, payload="x")

    with pytest.raises(ValidationError):
        record.payload = "y"


def test_with_id_returns_copy():
    record = ActionableRecord(timestamp=TIMESTAMP, payload="x")

    stored = record.with_id(7)

    assert stored.id == 7
    assert record.id is None
    assert stored.timestamp == record.timestamp


def test_actionable_record_encoding():
    actionable = _actionable()

    record = actionable.to_record(TIMESTAMP)

    assert record.id is None
    assert record.timestamp == TIMESTAMP
    assert Actionable.from_record(record) == actionable


def test_unknown_type_is_tolerated():
    actionable = _actionable(type="throttle_cpu_usage")

    assert actionable.known_type is None
    assert _actionable().known_type is ActionableType.SET_STANDBY_BUCKET


def test_severity_bounds_validated():
    with pytest.raises(ValidationError):
        _actionable(severity=6)
    with pytest.raises(ValidationError):
        _actionable(throttle_level=0)


def test_from_record_rejects_foreign_payload():
    with pytest.raises(ValidationError):
        Actionable.from_record(ActionableRecord(timestamp=TIMESTAMP, payload="not json"))


def test_record_rejects_values_sqlite_cannot_store():
    with pytest.raises(ValidationError):
        ActionableRecord(timestamp=2**63, payload="x")
    with pytest.raises(ValidationError):
        ActionableRecord(id=-(2**63) - 1, timestamp=TIMESTAMP, payload="x")

    assert ActionableRecord(timestamp=2**63 - 1, payload="x").timestamp == 2**63 - 1
