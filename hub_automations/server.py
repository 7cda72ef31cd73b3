import logging
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Query

from .compiler import compile_draft, dump_config_yaml, validate_draft
from .config import Settings, load_settings
from .errors import AutomationError, DraftValidationError, friendly_message
from .model import AutomationDraft, normalize_mode
from .platform_api import PlatformClient
from .summaries import describe_config
from .sync import AutomationSync, SyncOutcome

settings = load_settings()
logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)

app = FastAPI(title="hub-automations")


def get_settings() -> Settings:
    return settings


def get_sync(s: Settings = Depends(get_settings)) -> AutomationSync:
    platform = PlatformClient(s.platform_api_url, timeout=s.platform_timeout)
    return AutomationSync(platform, hub_timeout=s.ha_timeout)


# ----------------------------
# AUTH
# ----------------------------
def require_auth(
    x_ha_agent_secret: str = Header(default=""),
    s: Settings = Depends(get_settings),
) -> None:
    """
    If AGENT_SECRET is set, enforce it. If it's blank, allow local dev without headers.
    """
    if s.agent_secret and x_ha_agent_secret != s.agent_secret:
        raise HTTPException(status_code=401, detail="Unauthorized")


# ----------------------------
# UTIL
# ----------------------------
def _http_error(err: AutomationError) -> HTTPException:
    status = 400 if isinstance(err, DraftValidationError) else 502
    return HTTPException(status_code=status, detail=friendly_message(err))


def _outcome_payload(outcome: SyncOutcome, **extra: Any) -> Dict[str, Any]:
    if not outcome.handled:
        detail = friendly_message(outcome.error) if outcome.error else "No backend could complete that request."
        raise HTTPException(status_code=502, detail=detail)
    return {"ok": True, "backend": outcome.backend, **extra}


def _resolve_mode(mode: Optional[str], s: Settings) -> str:
    return normalize_mode(mode or s.ha_mode)


# ----------------------------
# API
# ----------------------------
@app.get("/api/health")
def api_health():
    return {"ok": True}


@app.get("/api/automations", dependencies=[Depends(require_auth)])
def api_list_automations(
    mode: Optional[str] = Query(default=None, description="home or cloud"),
    sync: AutomationSync = Depends(get_sync),
    s: Settings = Depends(get_settings),
):
    try:
        items = sync.list(s.hub_connection(), _resolve_mode(mode, s))
    except AutomationError as e:
        raise _http_error(e) from e
    return {"items": [it.model_dump(by_alias=True) for it in items]}


@app.post("/api/automations/compile", dependencies=[Depends(require_auth)])
def api_compile_automation(draft: AutomationDraft):
    config = compile_draft(draft)
    error: Optional[str] = None
    try:
        validate_draft(draft, config)
    except DraftValidationError as e:
        error = e.message
    return {
        "ok": error is None,
        "error": error,
        "config": config,
        "yaml": dump_config_yaml(config),
        **describe_config(config),
    }


@app.post("/api/automations", dependencies=[Depends(require_auth)])
def api_create_automation(
    draft: AutomationDraft,
    mode: Optional[str] = Query(default=None),
    sync: AutomationSync = Depends(get_sync),
    s: Settings = Depends(get_settings),
):
    try:
        outcome = sync.create(draft, s.hub_connection(), _resolve_mode(mode, s))
    except AutomationError as e:
        raise _http_error(e) from e
    return _outcome_payload(outcome)


@app.put("/api/automations/{automation_id}", dependencies=[Depends(require_auth)])
def api_update_automation(
    automation_id: str,
    draft: AutomationDraft,
    mode: Optional[str] = Query(default=None),
    sync: AutomationSync = Depends(get_sync),
    s: Settings = Depends(get_settings),
):
    try:
        outcome = sync.update(automation_id, draft, s.hub_connection(), _resolve_mode(mode, s))
    except AutomationError as e:
        raise _http_error(e) from e
    return _outcome_payload(outcome, id=automation_id)


@app.delete("/api/automations/{automation_id}", dependencies=[Depends(require_auth)])
def api_delete_automation(
    automation_id: str,
    mode: Optional[str] = Query(default=None),
    sync: AutomationSync = Depends(get_sync),
    s: Settings = Depends(get_settings),
):
    outcome = sync.delete(automation_id, s.hub_connection(), _resolve_mode(mode, s))
    return _outcome_payload(outcome, id=automation_id)


@app.post("/api/automations/{automation_id}/state", dependencies=[Depends(require_auth)])
def api_set_automation_state(
    automation_id: str,
    body: Dict[str, Any] = Body(default={}),
    mode: Optional[str] = Query(default=None),
    sync: AutomationSync = Depends(get_sync),
    s: Settings = Depends(get_settings),
):
    desired = body.get("state")
    enabled = body.get("enabled")
    if desired is None and enabled is None:
        raise HTTPException(status_code=400, detail="state or enabled is required")

    if enabled is None:
        st = str(desired).strip().lower()
        if st in {"on", "true", "1"}:
            enabled = True
        elif st in {"off", "false", "0"}:
            enabled = False
        else:
            raise HTTPException(status_code=400, detail="state must be 'on' or 'off'")

    outcome = sync.set_enabled(automation_id, bool(enabled), s.hub_connection(), _resolve_mode(mode, s))
    return _outcome_payload(outcome, id=automation_id, enabled=bool(enabled))
