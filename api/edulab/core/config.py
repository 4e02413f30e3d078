from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 3000

    gemini_api_key: str = ""  # set it in the .env file
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-pro"
    gemini_timeout_s: float = 60.0
    require_api_key: bool = False  # refuse to start without a key

    upload_dir: Path = Path("uploads")
    max_upload_mb: int = 12

    cors_origins: str = "*"  # comma separated

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def api_key_configured(self) -> bool:
        return bool(self.gemini_api_key.strip())


settings = Settings()


def get_settings() -> Settings:
    return settings
