"""
hub-automations: author home automations once, run them on the platform or the hub.

- Draft model for "when X happens, do Y" rules
- Compiler from drafts to the hub's native automation config
- Sync layer: platform API first, direct hub API as fallback
"""

from .catalog import CapabilityCatalog, DeviceCapability, action_from_spec, is_device_command, trigger_from_spec
from .compiler import compile_checked, compile_draft, dump_config_yaml, validate_draft
from .errors import (
    AutomationError,
    BackendError,
    DraftValidationError,
    FallbackUnavailable,
    HubError,
    PlatformError,
    friendly_message,
)
from .hub import HubClient, resolve_hub_url
from .model import (
    AutomationDraft,
    AutomationSummary,
    DeviceAction,
    HubConnection,
    NumericDeltaTrigger,
    PositionTrigger,
    StateTrigger,
    TimeTrigger,
)
from .platform_api import PlatformClient
from .sync import AutomationSync, SyncOutcome

__version__ = "0.1.0"

__all__ = [
    # Model
    "AutomationDraft",
    "AutomationSummary",
    "DeviceAction",
    "HubConnection",
    "NumericDeltaTrigger",
    "PositionTrigger",
    "StateTrigger",
    "TimeTrigger",
    # Catalog
    "CapabilityCatalog",
    "DeviceCapability",
    "action_from_spec",
    "trigger_from_spec",
    "is_device_command",
    # Compiler
    "compile_draft",
    "compile_checked",
    "validate_draft",
    "dump_config_yaml",
    # Backends
    "AutomationSync",
    "SyncOutcome",
    "HubClient",
    "PlatformClient",
    "resolve_hub_url",
    # Errors
    "AutomationError",
    "BackendError",
    "DraftValidationError",
    "FallbackUnavailable",
    "HubError",
    "PlatformError",
    "friendly_message",
]
