import pytest
import requests

from hub_automations import HubClient, HubConnection, HubError, PlatformClient, PlatformError, friendly_message
from hub_automations.hub import automation_entity_id, automation_summaries_from_states, resolve_hub_url
from hub_automations.platform_api import summary_from_platform_item

from .conftest import HUB_CLOUD, HUB_LOCAL, PLATFORM, FakeResponse


class TestResolveHub:
    def test_home_uses_local_url(self, hub_connection):
        assert resolve_hub_url(hub_connection, "home") == HUB_LOCAL

    def test_cloud_prefers_cloud_url(self, hub_connection):
        assert resolve_hub_url(hub_connection, "cloud") == HUB_CLOUD

    def test_cloud_without_cloud_url_uses_local(self):
        conn = HubConnection(base_url="http://192.168.1.10:8123/", long_lived_token="t")
        assert resolve_hub_url(conn, "cloud") == "http://192.168.1.10:8123"

    def test_home_ignores_cloud_url(self):
        conn = HubConnection(cloud_url=HUB_CLOUD, long_lived_token="t")
        assert resolve_hub_url(conn, "home") is None

    def test_no_connection(self):
        assert resolve_hub_url(None, "cloud") is None
        assert HubClient.for_connection(None) is None

    def test_blank_url_is_no_fallback(self):
        conn = HubConnection(base_url="   ", long_lived_token="t")
        assert HubClient.for_connection(conn, "home") is None


class TestHubClient:
    def test_error_status_includes_body(self, session):
        session.route("GET", HUB_LOCAL, FakeResponse(500, text="internal"))
        hub = HubClient(HUB_LOCAL, "tok", session=session)

        with pytest.raises(HubError) as exc:
            hub.get_states()
        assert exc.value.status_code == 500
        assert "internal" in exc.value.message

    def test_network_failure_hints_for_local_hosts(self, session):
        session.route("GET", "http://hub.local", requests.ConnectionError("Name not resolved"))
        hub = HubClient("http://hub.local:8123", "tok", session=session)

        with pytest.raises(HubError) as exc:
            hub.get_states()
        assert ".local" in exc.value.message
        assert "same Wi-Fi" in exc.value.message

    def test_timeout_is_passed_through(self, session):
        session.route("GET", HUB_LOCAL, FakeResponse(200, []))
        HubClient(HUB_LOCAL, "tok", timeout=3.5, session=session).get_states()
        assert session.calls[0][2]["timeout"] == 3.5

    def test_non_list_states_become_empty(self, session):
        session.route("GET", HUB_LOCAL, FakeResponse(200, {"message": "?"}))
        assert HubClient(HUB_LOCAL, "tok", session=session).list_automations() == []

    def test_summaries_skip_other_domains_and_garbage(self):
        items = automation_summaries_from_states([
            "garbage",
            {"entity_id": "script.x", "state": "on"},
            {"entity_id": "automation.porch", "state": "OFF", "attributes": {"friendly_name": "Porch"}},
            {"entity_id": "automation.hall", "state": "unavailable"},
        ])
        assert [(i.id, i.alias, i.enabled) for i in items] == [
            ("porch", "Porch", False),
            ("hall", "automation.hall", True),
        ]

    def test_entity_id_not_double_prefixed(self):
        assert automation_entity_id("automation.porch") == "automation.porch"
        assert automation_entity_id("porch") == "automation.porch"


class TestPlatformClient:
    def test_not_configured(self, session):
        with pytest.raises(PlatformError):
            PlatformClient("", session=session).list_automations()
        assert session.calls == []

    def test_session_expired(self, session):
        session.route("GET", PLATFORM, FakeResponse(401, {"error": "unauthorized"}))
        with pytest.raises(PlatformError) as exc:
            PlatformClient(PLATFORM, session=session).list_automations()
        assert exc.value.status_code == 401
        assert friendly_message(exc.value) == "Session expired. Please log in again."

    def test_non_json_success_is_fine(self, session):
        session.route("DELETE", PLATFORM, FakeResponse(204))
        PlatformClient(PLATFORM, session=session).delete_automation("a b")
        assert session.calls[0][1] == f"{PLATFORM}/api/automations/a%20b"

    def test_error_string_in_success_body(self, session):
        session.route("POST", PLATFORM, FakeResponse(200, {"error": "Hub not linked"}))
        with pytest.raises(PlatformError) as exc:
            PlatformClient(PLATFORM, session=session).set_automation_enabled("a", True)
        assert exc.value.message == "Hub not linked"
        assert session.calls[0][1] == f"{PLATFORM}/api/automations/a/enable"

    def test_blank_error_string_is_not_failure(self, session):
        session.route("POST", PLATFORM, FakeResponse(200, {"ok": True, "error": "  "}))
        PlatformClient(PLATFORM, session=session).create_automation({"draft": {}, "haConfig": {}})

    def test_non_list_body_lists_nothing(self, session):
        session.route("GET", PLATFORM, FakeResponse(200, {"items": []}))
        assert PlatformClient(PLATFORM, session=session).list_automations() == []

    def test_non_string_summaries_are_dropped(self, session):
        session.route("GET", PLATFORM, FakeResponse(200, [
            {"id": "a", "alias": "A", "triggerSummary": ["time 19:00"], "basicSummary": 3, "actionSummary": "light on"},
        ]))

        item = PlatformClient(PLATFORM, session=session).list_automations()[0]

        assert item.trigger_summary is None
        assert item.basic_summary is None
        assert item.action_summary == "light on"

    def test_summary_defaults(self):
        item = summary_from_platform_item({"slug": "s", "description": 3})
        assert item.id == "s"
        assert item.alias == "Automation"
        assert item.description == ""
        assert item.enabled is True


@pytest.mark.parametrize(
    "message,expected",
    [
        ("Hub network issue: timed out.", "We could not reach your home right now. Check Wi-Fi and try again."),
        ("Automation name taken", "Automation name taken"),
        ("see https://example.com/help", "We could not complete that right now. Please try again."),
        ("", "We could not complete that right now. Please try again."),
    ],
)
def test_friendly_message(message, expected):
    assert friendly_message(PlatformError(message)) == expected
