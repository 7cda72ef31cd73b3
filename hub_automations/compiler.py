"""
Draft -> native hub automation config.

`compile_draft` is pure: same draft in, same dict out, no I/O. The output uses
the hub's own automation schema field names (`platform`, `entity_id`,
`service`, `target`, `value_template`, ...), so it can be POSTed to the hub's
automation config endpoint unchanged or forwarded to the platform as
`haConfig`.

Commands the hub cannot express for an entity's domain degrade to the closest
generic service, or are dropped. `validate_draft` is where an empty result
becomes an error.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .catalog import is_device_command
from .errors import DraftValidationError
from .model import AutomationAction, AutomationDraft, AutomationTrigger

logger = logging.getLogger(__name__)

# Hardware-reported positions are never compared for exact equality.
POSITION_TOLERANCE = 0.01

TEMPERATURE_DELTA = 1.0
DEFAULT_DELTA = 0.01

# Dashboard conveniences that have no meaning inside an automation.
DASHBOARD_ONLY_COMMANDS = frozenset({"boiler/temp_up", "boiler/temp_down"})


def compile_draft(draft: AutomationDraft) -> Dict[str, Any]:
    trigger = [compile_trigger(t) for t in draft.triggers]
    action = [a for a in (compile_action(x) for x in draft.actions) if a is not None]

    condition: List[Dict[str, Any]] = []
    gate = _time_gate_condition(draft)
    if gate:
        condition.append(gate)
    for t in draft.triggers:
        delta = _delta_template_condition(t)
        if delta:
            condition.append(delta)

    config: Dict[str, Any] = {}
    if draft.id:
        config["id"] = draft.id
    config["alias"] = draft.alias
    config["description"] = draft.description or ""
    config["trigger"] = trigger
    config["action"] = action
    config["mode"] = draft.mode or "single"
    if condition:
        config["condition"] = condition
    return config


def validate_draft(draft: AutomationDraft, config: Optional[Dict[str, Any]] = None) -> None:
    """Raise DraftValidationError when the draft cannot become a working automation."""
    if config is None:
        config = compile_draft(draft)
    if not config.get("trigger") and not draft.has_gate():
        raise DraftValidationError("Please select a trigger device/condition or choose days/time.")
    if not draft.actions:
        raise DraftValidationError("Choose an action device and action to continue.")
    if not config.get("action"):
        raise DraftValidationError("None of the chosen actions can run in an automation for this device.")


def compile_checked(draft: AutomationDraft) -> Dict[str, Any]:
    config = compile_draft(draft)
    validate_draft(draft, config)
    return config


def dump_config_yaml(config: Dict[str, Any]) -> str:
    return yaml.safe_dump(config, sort_keys=False, allow_unicode=True)


# ----------------------------
# TRIGGERS
# ----------------------------
def compile_trigger(trigger: AutomationTrigger) -> Dict[str, Any]:
    if trigger.kind == "state":
        out: Dict[str, Any] = {"platform": "state", "entity_id": trigger.entity_id}
        if trigger.to is not None:
            out["to"] = trigger.to
        if trigger.from_ is not None:
            out["from"] = trigger.from_
        return out
    if trigger.kind == "numeric_delta":
        # Fires on every change; the template condition filters by magnitude.
        out = {"platform": "state", "entity_id": trigger.entity_id}
        if trigger.attribute and trigger.attribute != "state":
            out["attribute"] = trigger.attribute
        return out
    if trigger.kind == "position_equals":
        return {
            "platform": "numeric_state",
            "entity_id": trigger.entity_id,
            "attribute": trigger.attribute,
            "above": trigger.value - POSITION_TOLERANCE,
            "below": trigger.value + POSITION_TOLERANCE,
        }
    if trigger.kind == "time":
        out = {"platform": "time", "at": trigger.at}
        if trigger.days_of_week is not None:
            out["weekday"] = list(trigger.days_of_week)
        return out
    raise ValueError(f"unsupported trigger kind: {trigger.kind}")


# ----------------------------
# CONDITIONS
# ----------------------------
def _parse_hh_mm(value: str) -> Optional[Tuple[int, int]]:
    parts = value.split(":")
    if len(parts) < 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def one_minute_window(at: str) -> Optional[Tuple[str, str]]:
    """`"HH:MM"` -> (after, before) spanning exactly one minute, wrapping at midnight."""
    parsed = _parse_hh_mm(at)
    if parsed is None:
        return None
    h, m = parsed
    after = f"{h:02d}:{m:02d}"
    nxt = (h * 60 + m + 1) % (24 * 60)
    before = f"{nxt // 60:02d}:{nxt % 60:02d}"
    return after, before


def _time_gate_condition(draft: AutomationDraft) -> Optional[Dict[str, Any]]:
    at = (draft.trigger_time or "").strip()
    if not draft.days_of_week and not at:
        return None
    cond: Dict[str, Any] = {"condition": "time"}
    if draft.days_of_week:
        cond["weekday"] = list(draft.days_of_week)
    if at:
        window = one_minute_window(at)
        if window:
            cond["after"], cond["before"] = window
    return cond


def delta_threshold(attribute: str) -> float:
    return TEMPERATURE_DELTA if "temp" in attribute.lower() else DEFAULT_DELTA


def _delta_template_condition(trigger: AutomationTrigger) -> Optional[Dict[str, Any]]:
    if trigger.kind != "numeric_delta":
        return None
    attribute = trigger.attribute or "state"
    threshold = delta_threshold(attribute)
    path = "state" if attribute == "state" else f'attributes["{attribute}"]'
    to_val = f"(trigger.to_state.{path} | float(0))"
    from_val = f"(trigger.from_state.{path} | float(0))"
    if trigger.direction == "decrease":
        expr = f"({from_val} - {to_val}) >= {threshold:g}"
    else:
        expr = f"({to_val} - {from_val}) >= {threshold:g}"
    return {"condition": "template", "value_template": "{{ " + expr + " }}"}


# ----------------------------
# ACTIONS
# ----------------------------
def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def map_command_to_service(
    command: str,
    value: Optional[float],
    domain: str,
) -> Optional[Tuple[str, Optional[Dict[str, Any]]]]:
    """(command, entity domain) -> (service, data), or None when nothing should run."""
    domain = domain.lower()
    if command in DASHBOARD_ONLY_COMMANDS:
        return None

    if command == "light/turn_on":
        return ("light.turn_on" if domain == "light" else "homeassistant.turn_on"), None
    if command == "light/turn_off":
        return ("light.turn_off" if domain == "light" else "homeassistant.turn_off"), None
    if command == "light/set_brightness":
        if domain == "light":
            return "light.turn_on", {"brightness_pct": _clamp(value or 0, 0, 100)}
        # Brightness has no generic equivalent; best effort is "on".
        return "homeassistant.turn_on", None

    if command == "blind/open":
        return "cover.set_cover_position", {"position": 100}
    if command == "blind/close":
        return "cover.set_cover_position", {"position": 0}
    if command == "blind/set_position":
        return "cover.set_cover_position", {"position": _clamp(value or 0, 0, 100)}

    if command in ("tv/turn_on", "speaker/turn_on"):
        return "media_player.turn_on", None
    if command in ("tv/turn_off", "speaker/turn_off"):
        return "media_player.turn_off", None
    if command == "media/volume_set":
        return "media_player.volume_set", {"volume_level": _clamp((value or 0) / 100, 0, 1)}
    if command == "media/play_pause":
        return "media_player.media_play_pause", None

    if command == "boiler/set_temperature":
        service = "climate.set_temperature" if domain == "climate" else "homeassistant.turn_on"
        data = {"temperature": value} if value is not None else None
        return service, data

    return None


def compile_action(action: AutomationAction) -> Optional[Dict[str, Any]]:
    if action.kind != "device_command":
        return None
    mapping = map_command_to_service(action.command, action.value, action.domain)
    if mapping is None:
        if is_device_command(action.command):
            logger.debug("dropping %s on %s: no hub service", action.command, action.entity_id)
        else:
            logger.debug("dropping unknown command %r on %s", action.command, action.entity_id)
        return None
    service, data = mapping
    out: Dict[str, Any] = {"service": service, "target": {"entity_id": action.entity_id}}
    if data:
        out["data"] = data
    return out
