import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .errors import PlatformError
from .model import AutomationSummary

logger = logging.getLogger(__name__)


def check_platform_response(r: requests.Response) -> Any:
    """
    Return the decoded body of a successful platform response.

    Non-2xx is a failure, and so is a 2xx body carrying `ok: false` or a
    non-empty `error` string. A 2xx body that is not JSON decodes to None.
    """
    if not r.ok:
        text = (r.text or "").strip()
        if r.status_code in (401, 403):
            raise PlatformError("Session expired, please log in again.", status_code=r.status_code)
        raise PlatformError(text or f"Request failed ({r.status_code})", status_code=r.status_code)
    try:
        data = r.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        err = data.get("error")
        has_err = isinstance(err, str) and err.strip() != ""
        if data.get("ok") is False or has_err:
            raise PlatformError(err if has_err else "Request failed", status_code=r.status_code)
    return data


def _text_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def summary_from_platform_item(item: Dict[str, Any]) -> AutomationSummary:
    enabled = item.get("enabled")
    if enabled is None:
        enabled = item.get("state") != "off"
    description = item.get("description")
    return AutomationSummary(
        id=str(item.get("id") or item.get("entity_id") or item.get("slug") or ""),
        alias=str(item.get("alias") or item.get("name") or "Automation"),
        description=description if isinstance(description, str) else "",
        enabled=bool(enabled),
        basic_summary=_text_or_none(item.get("basicSummary")),
        trigger_summary=_text_or_none(item.get("triggerSummary")),
        action_summary=_text_or_none(item.get("actionSummary")),
    )


class PlatformClient:
    """REST client for the managed platform's automation endpoints."""

    def __init__(
        self,
        base_url: Optional[str],
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or "").strip().rstrip("/")
        self.timeout = timeout
        # Cookies/auth are attached by whoever owns the session.
        self._http = session or requests

    def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        if not self.base_url:
            raise PlatformError("Platform API is not configured. Set PLATFORM_API_URL.")
        logger.debug("platform %s %s", method, path)
        try:
            r = self._http.request(
                method,
                f"{self.base_url}{path}",
                headers={"Content-Type": "application/json"},
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PlatformError("Unable to reach the platform. Please try again.") from e
        return check_platform_response(r)

    def list_automations(self) -> List[AutomationSummary]:
        data = self.request("GET", "/api/automations")
        if not isinstance(data, list):
            return []
        return [summary_from_platform_item(item) for item in data if isinstance(item, dict)]

    def create_automation(self, payload: Dict[str, Any]) -> None:
        self.request("POST", "/api/automations", payload)

    def update_automation(self, automation_id: str, payload: Dict[str, Any]) -> None:
        self.request("PUT", f"/api/automations/{quote(automation_id, safe='')}", payload)

    def delete_automation(self, automation_id: str) -> None:
        self.request("DELETE", f"/api/automations/{quote(automation_id, safe='')}")

    def set_automation_enabled(self, automation_id: str, enabled: bool) -> None:
        action = "enable" if enabled else "disable"
        self.request("POST", f"/api/automations/{quote(automation_id, safe='')}/{action}")
