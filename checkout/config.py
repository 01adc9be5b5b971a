from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: str = "development"
    log_level: str = "INFO"

    api_host: str = "http://localhost:5000"
    api_namespace: str = "v1"
    auth_token: Optional[str] = None
    request_timeout: float = 30.0

    stripe_publishable_key: Optional[str] = None
    omise_live_public: Optional[str] = None
    omise_test_public: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="CHECKOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def api_base(self) -> str:
        return f"{self.api_host.rstrip('/')}/{self.api_namespace.strip('/')}"

settings = Settings()
