import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .model import HubConnection

load_dotenv()


def _clean_env_value(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    v = value.strip().strip('"').strip("'")
    # Guard against mistakenly copied Python expressions in .env
    if "os.getenv" in v or "os.environ" in v:
        return None
    return v


def _env_float(name: str, default: float) -> float:
    raw = _clean_env_value(os.getenv(name))
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings(BaseModel):
    platform_api_url: Optional[str] = None
    platform_timeout: float = 10.0
    ha_url: Optional[str] = None
    ha_cloud_url: Optional[str] = None
    ha_token: str = ""
    ha_timeout: float = 10.0
    ha_mode: str = "home"
    agent_secret: str = ""
    debug: bool = False

    def hub_connection(self) -> Optional[HubConnection]:
        """The hub configured for this process, if any URL is set."""
        if not (self.ha_url or self.ha_cloud_url):
            return None
        return HubConnection(
            base_url=self.ha_url,
            cloud_url=self.ha_cloud_url,
            long_lived_token=self.ha_token,
        )


def load_settings() -> Settings:
    return Settings(
        platform_api_url=_clean_env_value(os.getenv("PLATFORM_API_URL")),
        platform_timeout=_env_float("PLATFORM_REQUEST_TIMEOUT", 10.0),
        ha_url=_clean_env_value(os.getenv("HA_URL")),
        ha_cloud_url=_clean_env_value(os.getenv("HA_CLOUD_URL")),
        ha_token=_clean_env_value(os.getenv("HA_TOKEN")) or "",
        ha_timeout=_env_float("HA_REQUEST_TIMEOUT", 10.0),
        ha_mode=(_clean_env_value(os.getenv("HA_MODE")) or "home").lower(),
        agent_secret=_clean_env_value(os.getenv("AGENT_SECRET")) or "",
        debug=os.getenv("DEBUG", "0") == "1",
    )
