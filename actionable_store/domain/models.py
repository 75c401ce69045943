"""
Domain models for the device actionable store.

`ActionableRecord` mirrors one row of the `device_actionables` table. The store
treats its payload as opaque text. `Actionable` is the structured
recommendation producers usually encode into that payload.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

# SQLite INTEGER is a signed 64-bit value.
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1


class ActionableType(str, Enum):
    """Known optimization strategies an actionable can request."""

    SET_STANDBY_BUCKET = "set_standby_bucket"
    RESTRICT_BACKGROUND_DATA = "restrict_background_data"
    KILL_APP = "kill_app"
    MANAGE_WAKE_LOCKS = "manage_wake_locks"
    SET_BATTERY_ALERT = "set_battery_alert"
    SET_DATA_ALERT = "set_data_alert"


class ActionableRecord(BaseModel):
    """
    Representation of a single row in the `device_actionables` table.
    """

    id: Optional[int] = Field(
        None,
        ge=SQLITE_INT_MIN,
        le=SQLITE_INT_MAX,
        description="Store-assigned identity. None asks the store to assign one.",
    )
    timestamp: int = Field(
        ...,
        ge=SQLITE_INT_MIN,
        le=SQLITE_INT_MAX,
        description="Effective time in ms since epoch, caller-supplied.",
    )
    payload: str = Field(..., description="Opaque recommendation content.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    def with_id(self, record_id: int) -> "ActionableRecord":
        return self.model_copy(update={"id": record_id})


class Actionable(BaseModel):
    """
    A recommended device-health action targeting a single app.
    """

    id: str = Field(..., description="Producer-side identifier of the recommendation.")
    type: str = Field(..., description="One of ActionableType, unknown values tolerated.")
    description: str = Field(..., description="Human-readable description of the action.")
    package_name: str = Field(..., description="Package the action applies to.")
    estimated_battery_savings: Optional[float] = Field(None, description="Percent.")
    estimated_data_savings: Optional[float] = Field(None, description="Megabytes.")
    severity: Optional[int] = Field(None, ge=1, le=5)
    new_mode: Optional[str] = None
    enabled: Optional[bool] = None
    throttle_level: Optional[int] = Field(None, ge=1, le=10)
    reason: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @property
    def known_type(self) -> Optional[ActionableType]:
        try:
            return ActionableType(self.type)
        except ValueError:
            return None

    def to_record(self, timestamp: int, record_id: Optional[int] = None) -> ActionableRecord:
        """Encode this actionable as the JSON payload of a storable record."""
        return ActionableRecord(id=record_id, timestamp=timestamp, payload=self.model_dump_json())

    @classmethod
    def from_record(cls, record: ActionableRecord) -> "Actionable":
        """Decode an actionable previously stored with `to_record`."""
        return cls.model_validate_json(record.payload)


__all__ = ["Actionable", "ActionableRecord", "ActionableType"]
