"""
Capability catalog interface.

The catalog itself (which device type offers which triggers and actions)
lives outside this package. These are the shapes it hands over, plus the
conversion the editor applies once the user has picked a spec for a device.
"""

from typing import Annotated, Any, List, Literal, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field

from .model import (
    AutomationAction,
    AutomationTrigger,
    DeviceAction,
    NumericDeltaTrigger,
    PositionTrigger,
    StateTrigger,
    TimeTrigger,
    Weekday,
)

DEVICE_COMMANDS = (
    # Lights
    "light/turn_on",
    "light/turn_off",
    "light/toggle",
    "light/set_brightness",
    # Blinds
    "blind/open",
    "blind/close",
    "blind/set_position",
    # Media / TV / Speaker
    "media/play_pause",
    "media/next",
    "media/previous",
    "media/volume_up",
    "media/volume_down",
    "media/volume_set",
    "tv/turn_on",
    "tv/turn_off",
    "tv/toggle_power",
    "speaker/turn_on",
    "speaker/turn_off",
    "speaker/toggle_power",
    # Boiler
    "boiler/temp_up",
    "boiler/temp_down",
    "boiler/set_temperature",
)

Surface = Literal["dashboard", "automation"]


def is_device_command(value: Any) -> bool:
    return isinstance(value, str) and value in DEVICE_COMMANDS


class _SpecBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    surfaces: List[Surface] = Field(default_factory=list)


# ----------------------------
# TRIGGER SPECS
# ----------------------------
class StateTriggerSpec(_SpecBase):
    kind: Literal["state"] = "state"
    entity_state: Literal["on", "off"] = Field(alias="entityState")


class AttributeDeltaTriggerSpec(_SpecBase):
    kind: Literal["attribute_delta"] = "attribute_delta"
    attribute: str
    direction: Literal["increase", "decrease"]


class PositionTriggerSpec(_SpecBase):
    kind: Literal["position"] = "position"
    equals: float
    attributes: List[str] = Field(min_length=1)


class TimeTriggerSpec(_SpecBase):
    kind: Literal["time"] = "time"
    at: str
    days_of_week: Optional[List[Weekday]] = Field(default=None, alias="daysOfWeek")


TriggerSpec = Annotated[
    Union[StateTriggerSpec, AttributeDeltaTriggerSpec, PositionTriggerSpec, TimeTriggerSpec],
    Field(discriminator="kind"),
]


# ----------------------------
# ACTION SPECS
# ----------------------------
class ButtonActionSpec(_SpecBase):
    kind: Literal["button"] = "button"
    command: str
    value: Optional[float] = None
    primary: bool = False


class FixedActionSpec(_SpecBase):
    kind: Literal["fixed"] = "fixed"
    command: str
    value: float
    primary: bool = False


class SliderActionSpec(_SpecBase):
    kind: Literal["slider"] = "slider"
    command: str
    min: float
    max: float
    step: Optional[float] = None
    primary: bool = False


class ToggleActionSpec(_SpecBase):
    kind: Literal["toggle"] = "toggle"
    command_on: str = Field(alias="commandOn")
    command_off: str = Field(alias="commandOff")
    primary: bool = False


ActionSpec = Annotated[
    Union[ButtonActionSpec, FixedActionSpec, SliderActionSpec, ToggleActionSpec],
    Field(discriminator="kind"),
]


class DeviceCapability(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    triggers: List[TriggerSpec] = Field(default_factory=list)
    actions: List[ActionSpec] = Field(default_factory=list)
    exclude_from_automations: bool = Field(default=False, alias="excludeFromAutomations")

    def for_surface(self, surface: Surface = "automation") -> "DeviceCapability":
        """Only the specs offered on `surface`."""
        return DeviceCapability(
            triggers=[t for t in self.triggers if surface in t.surfaces],
            actions=[a for a in self.actions if surface in a.surfaces],
            exclude_from_automations=self.exclude_from_automations,
        )


class CapabilityCatalog(Protocol):
    def capabilities_for(self, device: Any) -> Optional[DeviceCapability]:
        ...


def trigger_from_spec(spec: TriggerSpec, entity_id: str) -> AutomationTrigger:
    if spec.kind == "state":
        return StateTrigger(entity_id=entity_id, to=spec.entity_state)
    if spec.kind == "attribute_delta":
        return NumericDeltaTrigger(
            entity_id=entity_id,
            attribute=spec.attribute,
            direction=spec.direction,
        )
    if spec.kind == "position":
        return PositionTrigger(
            entity_id=entity_id,
            attribute=spec.attributes[0],
            value=spec.equals,
        )
    if spec.kind == "time":
        return TimeTrigger(at=spec.at, days_of_week=spec.days_of_week)
    return StateTrigger(entity_id=entity_id)


def action_from_spec(spec: ActionSpec, entity_id: str, value: Optional[float] = None) -> AutomationAction:
    if spec.kind == "button":
        return DeviceAction(
            entity_id=entity_id,
            command=spec.command,
            value=value if value is not None else spec.value,
        )
    if spec.kind == "fixed":
        return DeviceAction(entity_id=entity_id, command=spec.command, value=spec.value)
    if spec.kind == "slider":
        return DeviceAction(entity_id=entity_id, command=spec.command, value=value)
    # Toggles belong on the dashboard; an automation can only say "on".
    return DeviceAction(entity_id=entity_id, command=spec.command_on)
