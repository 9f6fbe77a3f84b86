from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
VALID_REST_DAY_POLICIES = {"first_workday", "week_start"}


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="SHIFTPLAN_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="SHIFTPLAN_LOG_FILE")
    strength_slot_offsets: list[int] = Field(
        default_factory=lambda: [2, 4],
        validation_alias="SHIFTPLAN_STRENGTH_SLOT_OFFSETS",
        description="Offsets within each plan week (0-6) where a workday becomes strength training",
    )
    rest_day_policy: str = Field(
        default="first_workday",
        validation_alias="SHIFTPLAN_REST_DAY_POLICY",
        description="first_workday: earliest workday of the week; week_start: first day of the week",
    )
    allow_workday_run_fallback: bool = Field(
        default=False,
        validation_alias="SHIFTPLAN_ALLOW_WORKDAY_RUN_FALLBACK",
        description="Schedule an easy run on a workday when a week has no other run slot",
    )
    default_vo2max: float | None = Field(
        default=None,
        validation_alias="SHIFTPLAN_DEFAULT_VO2MAX",
        description="VO2max used for pace annotations when a request omits one",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        upper_value = value.upper()
        if upper_value not in VALID_LOG_LEVELS:
            logger.warning(f"Invalid SHIFTPLAN_LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(VALID_LOG_LEVELS))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("strength_slot_offsets")
    @classmethod
    def validate_strength_slot_offsets(cls, value: list[int]) -> list[int]:
        """Strength slots are week offsets, so each must fall in 0-6."""
        invalid = [offset for offset in value if not 0 <= offset <= 6]
        if invalid:
            raise ValueError(f"Strength slot offsets must be within 0-6, got: {invalid}")
        return sorted(set(value))

    @field_validator("rest_day_policy")
    @classmethod
    def validate_rest_day_policy(cls, value: str) -> str:
        lower_value = value.lower()
        if lower_value not in VALID_REST_DAY_POLICIES:
            logger.warning(f"Invalid SHIFTPLAN_REST_DAY_POLICY '{value}'. Defaulting to first_workday.")
            return "first_workday"
        return lower_value

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
