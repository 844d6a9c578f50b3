"""Configuration for the OpenAPI resources client."""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = "OpenAPI Resources Client/0.1.0"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    client_user_agent: str = Field(default=DEFAULT_USER_AGENT)
    client_timeout_seconds: float = Field(default=30)
    client_verify_ssl: bool = Field(default=True)
    client_log_level: str = Field(default="INFO")

    backend_host: str = Field(default="")
    backend_base_path: str = Field(default="")
    backend_schemes: Optional[str] = Field(default=None)
    backend_regions: Optional[str] = Field(default=None)

    provider_region: Optional[str] = Field(default=None)
    provider_values: Dict[str, str] = Field(default_factory=dict)

    def backend_scheme_list(self) -> List[str]:
        return _split(self.backend_schemes)

    def backend_region_list(self) -> List[str]:
        return _split(self.backend_regions)


def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class ProviderConfiguration(BaseModel):
    """Values configured by the user, keyed by configuration property name."""

    values: Dict[str, str] = Field(default_factory=dict)
    region: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderConfiguration":
        return cls(values=dict(settings.provider_values), region=settings.provider_region)

    def value(self, key: str) -> Optional[str]:
        return self.values.get(key) or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
