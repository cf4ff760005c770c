"""Application configuration via pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from hookgate.models import Endpoint


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Downstream notification API (base URL; /v11/notify is appended)
    downstream_url: str = "http://localhost:3030"
    notify_timeout: float = 10.0

    # Hooks
    # Directory holding one key file per endpoint; key_id is relative to it
    keys_dir: str = "/etc/hookgate/keys"
    # JSON list, e.g. [{"source": "GitHub", "key_id": "github_key"}]
    endpoints: list[Endpoint] = []
    hook_rate_limit: str = "600/minute"


settings = Settings()
