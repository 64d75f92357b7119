"""BulkStatus — Central Configuration via Pydantic Settings."""

from functools import lru_cache
from typing import Annotated, Dict, List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_STATUS_FIELDS = [
    "status",
    "resourceStatus",
    "accountStatus",
    "state",
    "accessLevel",
]

DEFAULT_STATUS_MAP = {
    "active": "ACTIVE_RESOURCE",
    "inactive": "INACTIVE_RESOURCE",
    "pending": "PENDING_APPROVAL",
    "blocked": "BLOCKED_RESOURCE",
}

FALLBACK_TARGET_STATUS = "ACTIVE"


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Remote API ──
    api_base_url: str = ""
    resource_endpoint: str = ""
    query_endpoint: str = ""  # Empty → resource_endpoint
    update_endpoint: str = ""  # Empty → resource_endpoint
    search_query_param: str = "filter"
    update_method: str = "PATCH"

    # ── Auth ──
    use_auth_header: bool = True
    auth_type: str = "Bearer"
    auth_token: str = ""

    # ── Status detection ──
    status_fields: Annotated[List[str], NoDecode] = list(DEFAULT_STATUS_FIELDS)
    status_map: Dict[str, str] = dict(DEFAULT_STATUS_MAP)
    target_state: str = "active"
    target_status: Optional[str] = None

    # ── Batch ──
    resource_identifiers: Annotated[List[str], NoDecode] = []
    min_delay: int = 3000  # ms
    max_delay: int = 7000  # ms
    request_timeout: int = 10000  # ms
    max_retries: int = 2

    # ── App ──
    log_level: str = "info"
    ui_language: str = "zh_TW"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", frozen=True
    )

    @field_validator("status_fields", "resource_identifiers", mode="before")
    @classmethod
    def _split_csv(cls, value):
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("status_fields")
    @classmethod
    def _require_status_fields(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("status_fields must name at least one field")
        return value

    @field_validator("min_delay", "max_delay", "request_timeout", "max_retries")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    @field_validator("update_method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.strip().upper() or "PATCH"

    @model_validator(mode="after")
    def _check_delay_range(self) -> "Settings":
        if self.min_delay > self.max_delay:
            raise ValueError(
                f"min_delay ({self.min_delay}) exceeds max_delay ({self.max_delay})"
            )
        return self

    @property
    def effective_target_status(self) -> str:
        """Explicit TARGET_STATUS wins, then the status map, then ACTIVE."""
        if self.target_status:
            return self.target_status
        return self.status_map.get(self.target_state) or FALLBACK_TARGET_STATUS

    @property
    def query_url(self) -> str:
        return f"{self.api_base_url}{self.query_endpoint or self.resource_endpoint}"

    @property
    def update_url(self) -> str:
        return f"{self.api_base_url}{self.update_endpoint or self.resource_endpoint}"

    @property
    def timeout_seconds(self) -> float:
        return self.request_timeout / 1000


@lru_cache
def get_settings() -> Settings:
    return Settings()
