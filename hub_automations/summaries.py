"""One-line descriptions of native triggers, conditions and actions."""

from typing import Any, Dict, List


def _as_list(val: Any) -> List[Any]:
    if not val:
        return []
    if isinstance(val, list):
        return val
    return [val]


def summarize_trigger(t: Any) -> str:
    if not isinstance(t, dict):
        return "trigger"
    platform = (t.get("platform") or t.get("trigger") or "").strip()
    if platform == "time":
        at = t.get("at")
        days = t.get("weekday")
        if at and days:
            return f"time at {at} on {', '.join(_as_list(days))}"
        if at:
            return f"time at {at}"
        return "time trigger"
    if platform == "state":
        eid = t.get("entity_id")
        attr = t.get("attribute")
        to = t.get("to")
        frm = t.get("from")
        if eid and attr:
            return f"state {eid} [{attr}] changes"
        if eid and frm is not None and to is not None:
            return f"state {eid} {frm} -> {to}"
        if eid and to is not None:
            return f"state {eid} -> {to}"
        if eid and frm is not None:
            return f"state {eid} leaves {frm}"
        if eid:
            return f"state {eid}"
    if platform == "numeric_state":
        eid = t.get("entity_id")
        attr = t.get("attribute")
        above = t.get("above")
        below = t.get("below")
        target = f"{eid} [{attr}]" if attr else f"{eid}"
        return f"numeric {target} {above if above is not None else ''}-{below if below is not None else ''}".strip()
    if platform:
        return f"{platform} trigger"
    return "trigger"


def summarize_condition(c: Any) -> str:
    if not isinstance(c, dict):
        return "condition"
    cond = (c.get("condition") or "").strip()
    if cond == "time":
        days = _as_list(c.get("weekday"))
        after = c.get("after")
        before = c.get("before")
        parts = []
        if days:
            parts.append(", ".join(days))
        if after or before:
            parts.append(f"{after or ''}-{before or ''}")
        return ("time " + " ".join(parts)).strip()
    if cond == "template":
        return "template check"
    if cond:
        return f"{cond} condition"
    return "condition"


def summarize_action(a: Any) -> str:
    if not isinstance(a, dict):
        return "action"
    if "service" in a:
        svc = a.get("service")
        target = a.get("target") or {}
        eid = target.get("entity_id") if isinstance(target, dict) else None
        data = a.get("data") or {}
        extra = ", ".join(f"{k}={v}" for k, v in data.items()) if isinstance(data, dict) else ""
        text = f"service {svc} -> {eid}" if eid else f"service {svc}"
        return f"{text} ({extra})" if extra else text
    return "action"


def describe_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Summaries of a compiled config for previews."""
    triggers = [summarize_trigger(t) for t in _as_list(config.get("trigger"))]
    conditions = [summarize_condition(c) for c in _as_list(config.get("condition"))]
    actions = [summarize_action(a) for a in _as_list(config.get("action"))]
    return {
        "basicSummary": f"{config.get('alias') or 'Automation'}: {len(triggers)} trigger(s), {len(actions)} action(s)",
        "triggerSummary": "; ".join(triggers),
        "conditionSummary": "; ".join(conditions),
        "actionSummary": "; ".join(actions),
    }
