import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
import requests

from hub_automations import AutomationDraft, HubConnection


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._payload = payload
        if text is not None:
            self.text = text
        elif payload is not None:
            self.text = json.dumps(payload)
        else:
            self.text = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if not self.text:
            raise ValueError("no body")
        return json.loads(self.text)


Route = Callable[[str, str, Dict[str, Any]], FakeResponse]


class FakeSession:
    """Stands in for requests.Session; routes by (method, url prefix)."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self._routes: List[Tuple[str, str, Any]] = []

    def route(self, method: str, url: str, response: Any) -> None:
        self._routes.append((method.upper(), url, response))

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method.upper(), url, kwargs))
        for m, prefix, response in self._routes:
            if m == method.upper() and url.startswith(prefix):
                if isinstance(response, Exception):
                    raise response
                if callable(response):
                    return response(method, url, kwargs)
                return response
        raise requests.ConnectionError(f"no route for {method} {url}")

    def urls(self) -> List[str]:
        return [u for _, u, _ in self.calls]


PLATFORM = "https://platform.example"
HUB_LOCAL = "http://192.168.1.10:8123"
HUB_CLOUD = "https://home.example.net"


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def hub_connection() -> HubConnection:
    return HubConnection(base_url=HUB_LOCAL, cloud_url=HUB_CLOUD, long_lived_token="tok")


@pytest.fixture
def evening_lights() -> AutomationDraft:
    return AutomationDraft.model_validate({
        "alias": "Evening lights",
        "triggers": [{"kind": "time", "at": "19:00"}],
        "actions": [{"kind": "device_command", "command": "light/turn_on", "entityId": "light.living_room"}],
    })
