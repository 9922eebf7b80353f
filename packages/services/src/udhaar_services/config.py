"""Configuration system for Udhaar Setu services.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults.

Usage:
    from udhaar_services.config import UdhaarConfig

    # Load from environment variables and .env file
    config = UdhaarConfig()

    # Access loan limits
    print(config.loan.min_term_months)

    # Access submission settings
    print(config.submission.simulated_delay_seconds)
"""

from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from udhaar_core.exceptions import ConfigurationError
from udhaar_core.form_engine import MAX_TERM_MONTHS, MIN_TERM_MONTHS
from udhaar_core.uploads import ALLOWED_CONTENT_TYPES, MAX_UPLOAD_BYTES


class LoanLimitsConfig(BaseSettings):
    """Bounds and defaults of the loan estimator.

    Environment Variables:
        UDHAAR_LOAN_MIN_TERM_MONTHS: Shortest selectable term
        UDHAAR_LOAN_MAX_TERM_MONTHS: Longest selectable term
        UDHAAR_LOAN_DEFAULT_TERM_MONTHS: Term preselected on the form
        UDHAAR_LOAN_DEFAULT_AMOUNT: Amount preselected on the form
        UDHAAR_LOAN_AMOUNT_STEP: Slider step for the amount
    """

    model_config = SettingsConfigDict(
        env_prefix="UDHAAR_LOAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    min_term_months: int = Field(
        default=MIN_TERM_MONTHS,
        gt=0,
        description="Shortest term offered by the estimator",
    )
    max_term_months: int = Field(
        default=MAX_TERM_MONTHS,
        gt=0,
        description="Longest term offered by the estimator",
    )
    default_term_months: int = Field(
        default=12,
        gt=0,
        description="Term preselected when the form opens",
    )
    default_amount: int = Field(
        default=10000,
        gt=0,
        description="Loan amount preselected when the form opens",
    )
    amount_step: int = Field(
        default=1000,
        gt=0,
        description="Step of the loan amount slider",
    )

    @model_validator(mode="after")
    def check_term_bounds(self) -> "LoanLimitsConfig":
        """Ensure the default term lies within the configured bounds."""
        if self.min_term_months > self.max_term_months:
            raise ConfigurationError(
                "Minimum term exceeds maximum term",
                config_key="UDHAAR_LOAN_MIN_TERM_MONTHS",
                expected=f"<= {self.max_term_months}",
                actual=self.min_term_months,
            )
        if not self.min_term_months <= self.default_term_months <= self.max_term_months:
            raise ConfigurationError(
                "Default term is outside the allowed range",
                config_key="UDHAAR_LOAN_DEFAULT_TERM_MONTHS",
                expected=f"{self.min_term_months}-{self.max_term_months}",
                actual=self.default_term_months,
            )
        return self


class UploadConfig(BaseSettings):
    """Limits for proof documents.

    Environment Variables:
        UDHAAR_UPLOAD_MAX_SIZE_BYTES: Largest accepted file
        UDHAAR_UPLOAD_ALLOWED_CONTENT_TYPES: JSON list of accepted MIME types
    """

    model_config = SettingsConfigDict(
        env_prefix="UDHAAR_UPLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_size_bytes: int = Field(
        default=MAX_UPLOAD_BYTES,
        gt=0,
        description="Largest accepted upload in bytes",
    )
    allowed_content_types: list[str] = Field(
        default_factory=lambda: sorted(ALLOWED_CONTENT_TYPES),
        description="Accepted MIME types",
    )

    @field_validator("allowed_content_types")
    @classmethod
    def validate_content_types(cls, v: list[str]) -> list[str]:
        """Normalize MIME types and refuse an empty list."""
        cleaned = [t.strip().lower() for t in v if t and t.strip()]
        if not cleaned:
            raise ValueError("At least one content type must be allowed")
        return cleaned

    def limits(self) -> dict:
        """Keyword arguments for the upload checks."""
        return {
            "allowed_content_types": self.allowed_content_types,
            "max_size_bytes": self.max_size_bytes,
        }


class SubmissionConfig(BaseSettings):
    """Settings of the mock submission backend.

    Environment Variables:
        UDHAAR_SUBMISSION_SIMULATED_DELAY_SECONDS: Artificial latency
        UDHAAR_SUBMISSION_FAILURE_KEYWORD: Business-name substring that triggers a rejection
    """

    model_config = SettingsConfigDict(
        env_prefix="UDHAAR_SUBMISSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    simulated_delay_seconds: float = Field(
        default=1.5,
        ge=0,
        description="Artificial latency of the mock backend",
    )
    failure_keyword: Optional[str] = Field(
        default="fail",
        description="Business-name substring that makes the mock backend reject",
    )


class UdhaarConfig(BaseSettings):
    """Root configuration for Udhaar Setu services.

    Environment Variables:
        UDHAAR_ENV: Environment name (development, staging, production, test)
        UDHAAR_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        # Load all configuration from environment
        config = UdhaarConfig()

        # Override specific settings
        config = UdhaarConfig(
            submission=SubmissionConfig(simulated_delay_seconds=0),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="UDHAAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    loan: LoanLimitsConfig = Field(default_factory=LoanLimitsConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    submission: SubmissionConfig = Field(default_factory=SubmissionConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"
