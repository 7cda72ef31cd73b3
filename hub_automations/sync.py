"""
Automation sync: platform first, hub as the single fallback hop.

Every operation tries the platform API. If that fails and a hub connection
resolves for the requested mode, the same intent is applied directly to the
hub. The two attempts never overlap: issuing both could leave one automation
on two backends under different ids.

Failure policy when both paths are exhausted:
    list / create / update  -> raise the original platform error
    delete / set_enabled    -> return an unhandled SyncOutcome carrying it

Drafts are compiled and validated before any request, so a draft that can
never run is rejected with DraftValidationError and nothing is sent.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from .compiler import compile_checked
from .errors import BackendError, FallbackUnavailable
from .hub import HubClient
from .model import AutomationDraft, AutomationSummary, HubConnection, normalize_mode
from .platform_api import PlatformClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SyncOutcome:
    """Result of a write; `handled` is False when no backend accepted it."""

    handled: bool
    backend: Optional[str] = None
    error: Optional[BackendError] = None

    def __bool__(self) -> bool:
        return self.handled

    def raise_for_outcome(self) -> None:
        if not self.handled and self.error is not None:
            raise self.error


def fallback_automation_id(config: Dict[str, Any]) -> str:
    """Hub config id: draft id, else alias, else a generated one."""
    return str(config.get("id") or config.get("alias") or f"automation_{int(time.time() * 1000)}")


class AutomationSync:
    def __init__(
        self,
        platform: PlatformClient,
        hub_timeout: float = 10.0,
        hub_session: Optional[requests.Session] = None,
    ) -> None:
        self.platform = platform
        self.hub_timeout = hub_timeout
        self.hub_session = hub_session

    def _hub(self, connection: Optional[HubConnection], mode: Optional[str]) -> HubClient:
        hub = HubClient.for_connection(
            connection,
            normalize_mode(mode),
            timeout=self.hub_timeout,
            session=self.hub_session,
        )
        if hub is None:
            raise FallbackUnavailable("No hub connection is available for this mode.")
        return hub

    def _with_fallback(
        self,
        op: str,
        primary: Callable[[], T],
        fallback: Callable[[HubClient], T],
        connection: Optional[HubConnection],
        mode: Optional[str],
    ) -> T:
        try:
            return primary()
        except BackendError as err:
            logger.debug("platform %s failed (%s); trying hub", op, err.message)
            try:
                hub = self._hub(connection, mode)
                return fallback(hub)
            except FallbackUnavailable:
                raise err
            except Exception as hub_err:
                raise err from hub_err

    def _best_effort(
        self,
        op: str,
        primary: Callable[[], None],
        fallback: Callable[[HubClient], None],
        connection: Optional[HubConnection],
        mode: Optional[str],
    ) -> SyncOutcome:
        try:
            primary()
            return SyncOutcome(True, "platform")
        except BackendError as err:
            logger.debug("platform %s failed (%s); trying hub", op, err.message)
            try:
                fallback(self._hub(connection, mode))
                return SyncOutcome(True, "hub")
            except Exception as hub_err:
                logger.debug("hub %s not handled: %s", op, hub_err)
                return SyncOutcome(False, None, err)

    # ----------------------------
    # OPERATIONS
    # ----------------------------
    def list(
        self,
        connection: Optional[HubConnection] = None,
        mode: Optional[str] = "home",
    ) -> List[AutomationSummary]:
        return self._with_fallback(
            "list",
            self.platform.list_automations,
            lambda hub: hub.list_automations(),
            connection,
            mode,
        )

    def create(
        self,
        draft: AutomationDraft,
        connection: Optional[HubConnection] = None,
        mode: Optional[str] = "home",
    ) -> SyncOutcome:
        config = compile_checked(draft)
        payload = {"draft": draft.to_wire(), "haConfig": config}

        def primary() -> SyncOutcome:
            self.platform.create_automation(payload)
            return SyncOutcome(True, "platform")

        def fallback(hub: HubClient) -> SyncOutcome:
            hub.upsert_automation_config(fallback_automation_id(config), config)
            return SyncOutcome(True, "hub")

        return self._with_fallback("create", primary, fallback, connection, mode)

    def update(
        self,
        automation_id: str,
        draft: AutomationDraft,
        connection: Optional[HubConnection] = None,
        mode: Optional[str] = "home",
    ) -> SyncOutcome:
        draft = draft.model_copy(update={"id": automation_id})
        config = compile_checked(draft)
        payload = {"draft": draft.to_wire(), "haConfig": config}

        def primary() -> SyncOutcome:
            self.platform.update_automation(automation_id, payload)
            return SyncOutcome(True, "platform")

        def fallback(hub: HubClient) -> SyncOutcome:
            hub.upsert_automation_config(fallback_automation_id(config), config)
            return SyncOutcome(True, "hub")

        return self._with_fallback("update", primary, fallback, connection, mode)

    def delete(
        self,
        automation_id: str,
        connection: Optional[HubConnection] = None,
        mode: Optional[str] = "home",
    ) -> SyncOutcome:
        return self._best_effort(
            "delete",
            lambda: self.platform.delete_automation(automation_id),
            lambda hub: hub.delete_automation_config(automation_id),
            connection,
            mode,
        )

    def set_enabled(
        self,
        automation_id: str,
        enabled: bool,
        connection: Optional[HubConnection] = None,
        mode: Optional[str] = "home",
    ) -> SyncOutcome:
        return self._best_effort(
            "set_enabled",
            lambda: self.platform.set_automation_enabled(automation_id, enabled),
            lambda hub: hub.set_automation_enabled(automation_id, enabled),
            connection,
            mode,
        )
