"""
Draft model for user-authored automations.

A draft is what the editor builds from catalog choices. It is never sent to
the hub as-is: `compiler.compile_draft` lowers it to the hub's native
automation config right before each write.

Field names follow the UI's camelCase wire format (`entityId`,
`daysOfWeek`, ...); the snake_case attribute names are accepted too.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

AutomationMode = Literal["single", "restart", "queued", "parallel"]
Weekday = Literal["mon", "tue", "wed", "thu", "fri", "sat", "sun"]
HubMode = Literal["home", "cloud"]


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ----------------------------
# TRIGGERS
# ----------------------------
class StateTrigger(_WireModel):
    kind: Literal["state"] = "state"
    entity_id: str = Field(alias="entityId")
    to: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")


class NumericDeltaTrigger(_WireModel):
    """Fires on every change; magnitude is checked by a template condition."""

    kind: Literal["numeric_delta"] = "numeric_delta"
    entity_id: str = Field(alias="entityId")
    attribute: str = "state"
    direction: Literal["increase", "decrease"]


class PositionTrigger(_WireModel):
    kind: Literal["position_equals"] = "position_equals"
    entity_id: str = Field(alias="entityId")
    attribute: str
    value: float


class TimeTrigger(_WireModel):
    kind: Literal["time"] = "time"
    at: str
    days_of_week: Optional[List[Weekday]] = Field(default=None, alias="daysOfWeek")


AutomationTrigger = Annotated[
    Union[StateTrigger, NumericDeltaTrigger, PositionTrigger, TimeTrigger],
    Field(discriminator="kind"),
]


# ----------------------------
# ACTIONS
# ----------------------------
class DeviceAction(_WireModel):
    kind: Literal["device_command"] = "device_command"
    entity_id: str = Field(alias="entityId")
    command: str
    value: Optional[float] = None

    @property
    def domain(self) -> str:
        return self.entity_id.split(".", 1)[0].lower()


AutomationAction = DeviceAction


# ----------------------------
# DRAFT
# ----------------------------
class AutomationDraft(_WireModel):
    id: Optional[str] = None
    alias: str = Field(min_length=1)
    description: Optional[str] = None
    mode: Optional[AutomationMode] = None
    triggers: List[AutomationTrigger] = Field(default_factory=list)
    actions: List[AutomationAction] = Field(default_factory=list)
    days_of_week: Optional[List[Weekday]] = Field(default=None, alias="daysOfWeek")
    trigger_time: Optional[str] = Field(default=None, alias="triggerTime")

    def has_gate(self) -> bool:
        """True when day-of-week or time-of-day gating is requested."""
        return bool(self.days_of_week) or bool((self.trigger_time or "").strip())

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# ----------------------------
# READ MODEL + CONNECTION
# ----------------------------
class AutomationSummary(_WireModel):
    id: str
    alias: str
    description: Optional[str] = None
    enabled: bool = True
    # Only the platform provides these; the hub exposes no readable summary.
    basic_summary: Optional[str] = Field(default=None, alias="basicSummary")
    trigger_summary: Optional[str] = Field(default=None, alias="triggerSummary")
    action_summary: Optional[str] = Field(default=None, alias="actionSummary")


class HubConnection(_WireModel):
    base_url: Optional[str] = Field(default=None, alias="baseUrl")
    cloud_url: Optional[str] = Field(default=None, alias="cloudUrl")
    long_lived_token: str = Field(default="", alias="longLivedToken")


def normalize_mode(mode: Optional[str]) -> HubMode:
    return "cloud" if (mode or "").strip().lower() == "cloud" else "home"
