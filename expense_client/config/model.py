from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..constants import (
    API_BASE_URL,
    DASHBOARD_INIT_TIMEOUT_SECONDS,
    HTTP_REQUEST_TIMEOUT_SECONDS,
    STATE_DIR,
    TOKEN_VALIDATION_TIMEOUT_SECONDS,
)


class ClientConfig(BaseModel):
    """Runtime settings for the expense tracker client.

    Attributes:
        base_url: Backend origin, e.g. ``http://localhost:8080``.
        state_dir: Directory holding the local store and cookie files.
        validation_timeout: Bound on a single token validation call.
        init_timeout: Outer bound on dashboard validation.
        request_timeout: Total timeout for ordinary API requests.
        log_file: Optional path for a plain-text log file.
    """

    base_url: str = API_BASE_URL
    state_dir: str = STATE_DIR
    validation_timeout: float = Field(default=TOKEN_VALIDATION_TIMEOUT_SECONDS, gt=0)
    init_timeout: float = Field(default=DASHBOARD_INIT_TIMEOUT_SECONDS, gt=0)
    request_timeout: float = Field(default=HTTP_REQUEST_TIMEOUT_SECONDS, gt=0)
    log_file: str | None = None

    @field_validator("base_url", mode="before")
    @classmethod
    def validate_base_url(cls, v: Any) -> str:
        """Require an http(s) origin and strip the trailing slash."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("base_url must be a non-empty string")
        url = v.strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return url

    @field_validator("state_dir", mode="before")
    @classmethod
    def validate_state_dir(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("state_dir must be a non-empty string")
        return v.strip()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ClientConfig:
        """Create ClientConfig from a dictionary, ignoring unknown keys.

        Args:
            data: Dictionary containing configuration values.

        Returns:
            ClientConfig instance.
        """
        known = {k: v for k, v in data.items() if k in cls.model_fields}
        return cls.model_validate(known)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
