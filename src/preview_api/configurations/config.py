import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

env_name = os.getenv("ENV", "dev")
load_dotenv("config/.env", override=True)
load_dotenv(f"config/.env.{env_name}", override=True)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class Settings(BaseSettings):
    env: str = "dev"
    app_name: str = "Link Preview API"
    gcp_project_id: str = ""
    log_level: str = "INFO"

    # Outbound fetching
    fetch_timeout: float = 10.0
    favicon_probe_timeout: float = 3.0
    favicon_probe_enabled: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    max_connections: int = 100

    cors_allow_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(
        extra="allow",
    )


settings = Settings()
