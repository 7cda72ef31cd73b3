"""
Direct hub (Home Assistant REST) access, used when the platform is unreachable.

Endpoints:
    GET    /api/states
    POST   /api/config/automation/config/{id}   (upsert)
    DELETE /api/config/automation/config/{id}
    POST   /api/services/{domain}/{service}
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlparse

import requests

from .errors import HubError
from .model import AutomationSummary, HubConnection, normalize_mode

logger = logging.getLogger(__name__)

AUTOMATION_PREFIX = "automation."


def resolve_hub_url(connection: Optional[HubConnection], mode: Optional[str] = "home") -> Optional[str]:
    """
    Pick the hub URL for `mode`.

    cloud -> cloud URL when configured, else the local URL.
    home  -> always the local URL.
    Returns None when nothing usable is configured.
    """
    if connection is None:
        return None
    raw = connection.base_url
    if normalize_mode(mode) == "cloud" and connection.cloud_url:
        raw = connection.cloud_url
    raw = (raw or "").strip()
    if not raw:
        return None
    return raw.rstrip("/")


def describe_network_failure(base_url: str, err: Exception) -> HubError:
    hints: List[str] = []
    try:
        parsed = urlparse(base_url)
        host = (parsed.hostname or "").lower()
        if host.endswith(".local"):
            hints.append(
                "Some devices cannot resolve .local hostnames; use the hub's IP address "
                "(e.g. http://192.168.1.10:8123) instead."
            )
        if parsed.scheme == "http":
            hints.append("Make sure you are on the same Wi-Fi as the hub.")
    except ValueError:
        pass
    hint_text = f" {' '.join(hints)}" if hints else ""
    return HubError(f"Hub network issue: {err}.{hint_text} Please try again.")


def automation_summaries_from_states(states: Any) -> List[AutomationSummary]:
    if not isinstance(states, list):
        return []
    items: List[AutomationSummary] = []
    for s in states:
        if not isinstance(s, dict):
            continue
        entity_id = s.get("entity_id")
        if not isinstance(entity_id, str) or not entity_id.startswith(AUTOMATION_PREFIX):
            continue
        attrs = s.get("attributes")
        if not isinstance(attrs, dict):
            attrs = {}
        items.append(AutomationSummary(
            id=str(attrs.get("id") or entity_id[len(AUTOMATION_PREFIX):]),
            alias=str(attrs.get("friendly_name") or entity_id),
            description=str(attrs.get("description") or ""),
            enabled=str(s.get("state") or "").lower() != "off",
        ))
    return items


def automation_entity_id(automation_id: str) -> str:
    if automation_id.startswith(AUTOMATION_PREFIX):
        return automation_id
    return f"{AUTOMATION_PREFIX}{automation_id}"


class HubClient:
    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._http = session or requests

    @classmethod
    def for_connection(
        cls,
        connection: Optional[HubConnection],
        mode: Optional[str] = "home",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> Optional["HubClient"]:
        url = resolve_hub_url(connection, mode)
        if not url:
            return None
        return cls(url, connection.long_lived_token, timeout=timeout, session=session)

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}", "Content-Type": "application/json"}

    def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path if path.startswith('/') else '/' + path}"
        logger.debug("hub %s %s", method, path)
        try:
            r = self._http.request(method, url, headers=self.headers(), json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise describe_network_failure(self.base_url, e) from e
        if not r.ok:
            text = (r.text or "").strip()
            raise HubError(
                f"Hub could not complete that request ({r.status_code}). {text or 'Please try again.'}",
                status_code=r.status_code,
            )
        if not r.text:
            return None
        try:
            return r.json()
        except ValueError:
            return None

    # ----------------------------
    # STATES / SERVICES
    # ----------------------------
    def get_states(self) -> List[Dict[str, Any]]:
        data = self.request("GET", "/api/states")
        return data if isinstance(data, list) else []

    def call_service(self, domain: str, service: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", f"/api/services/{domain}/{service}", data or {})

    # ----------------------------
    # AUTOMATIONS
    # ----------------------------
    def list_automations(self) -> List[AutomationSummary]:
        return automation_summaries_from_states(self.get_states())

    def upsert_automation_config(self, automation_id: str, config: Dict[str, Any]) -> None:
        self.request(
            "POST",
            f"/api/config/automation/config/{quote(automation_id, safe='')}",
            {**config, "id": automation_id},
        )

    def delete_automation_config(self, automation_id: str) -> None:
        self.request("DELETE", f"/api/config/automation/config/{quote(automation_id, safe='')}")

    def set_automation_enabled(self, automation_id: str, enabled: bool) -> None:
        service = "turn_on" if enabled else "turn_off"
        self.call_service("automation", service, {"entity_id": automation_entity_id(automation_id)})
