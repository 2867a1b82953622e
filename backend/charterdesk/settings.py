import json
from decimal import Decimal
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "charterdesk-pricing"
    app_env: Literal["dev", "prod"] = Field("prod")
    cors_origins_raw: str | None = Field(None, validation_alias="cors_origins")
    strict_cors: bool = Field(False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO")

    currency: str = Field("inr")
    gst_percent: Decimal = Field(Decimal("18"))
    gst_inclusive: bool = Field(False)
    cancellation_24h_refund: Decimal = Field(Decimal("100"))
    cancellation_12h_refund: Decimal = Field(Decimal("50"))
    cancellation_late_refund: Decimal = Field(Decimal("0"))
    full_refund_hours: float = Field(24)
    partial_refund_hours: float = Field(12)
    party_full_refund_days: float = Field(7)
    party_partial_refund_days: float = Field(3)
    party_partial_refund_percent: Decimal = Field(Decimal("50"))
    advance_percent: Decimal = Field(Decimal("50"))
    remainder_due_before_days: int = Field(1)
    weekend_days_raw: str | None = Field("0,6", validation_alias="weekend_days")
    max_advance_days: int = Field(45)
    min_notice_hours: float = Field(2)
    buffer_minutes: int = Field(30)

    model_config = SettingsConfigDict(env_file=".env", enable_decoding=False)

    @field_validator("cors_origins_raw", "weekend_days_raw", mode="before")
    @classmethod
    def normalize_list_raw(cls, value: object) -> str | None:
        return cls._normalize_raw_list(value)

    @field_validator(
        "gst_percent",
        "cancellation_24h_refund",
        "cancellation_12h_refund",
        "cancellation_late_refund",
        "party_partial_refund_percent",
        "advance_percent",
    )
    @classmethod
    def validate_percent(cls, value: Decimal) -> Decimal:
        if value < 0 or value > 100:
            raise ValueError("percentages must be between 0 and 100")
        return value

    @model_validator(mode="after")
    def validate_prod_settings(self) -> "Settings":
        if self.app_env != "prod":
            return self
        if self.strict_cors:
            if not self.cors_origins:
                raise ValueError("STRICT_CORS=true in prod requires explicit CORS_ORIGINS")
            if any(origin == "*" for origin in self.cors_origins):
                raise ValueError("STRICT_CORS=true in prod does not allow wildcard CORS_ORIGINS entries")
        return self

    @property
    def cors_origins(self) -> list[str]:
        return self._parse_list(self.cors_origins_raw)

    @cors_origins.setter
    def cors_origins(self, value: list[str] | str | None) -> None:
        self.cors_origins_raw = self._normalize_raw_list(value)

    @property
    def weekend_days(self) -> tuple[int, ...]:
        parsed = self._parse_list(self.weekend_days_raw)
        if not parsed:
            return (0, 6)
        return tuple(int(entry) for entry in parsed)

    @staticmethod
    def _normalize_raw_list(value: object) -> str | None:
        if value is None:
            return None
        if isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            return json.dumps(list(value))
        return str(value)

    @staticmethod
    def _parse_list(raw: str | None) -> list[str]:
        if raw is None:
            return []
        stripped = raw.strip()
        if not stripped:
            return []
        if stripped.startswith("["):
            parsed = json.loads(stripped)
            if isinstance(parsed, list):
                return [str(entry).strip() for entry in parsed if str(entry).strip()]
            return [str(parsed).strip()] if str(parsed).strip() else []
        entries = [entry.strip() for entry in stripped.split(",")]
        return [entry for entry in entries if entry]


settings = Settings()
