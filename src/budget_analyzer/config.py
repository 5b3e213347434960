"""Configuration system for the Budget Analyzer.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the estimation service.

Usage:
    from budget_analyzer.config import BudgetAnalyzerConfig

    # Load from environment variables and .env file
    config = BudgetAnalyzerConfig()

    # Access LLM settings
    print(config.llm.model)
    print(config.llm.timeout)
"""

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_MODEL = "claude-sonnet-4-20250514"


class LLMConfig(BaseSettings):
    """Settings for the remote estimation model.

    The two calls have very different output sizes: the tax call returns a
    forced tool input with three fields, the analysis call a short narrative
    of a few paragraphs. Each gets its own output token ceiling.

    Environment Variables:
        BUDGET_ANALYZER_LLM_MODEL: Model identifier used for both calls
        BUDGET_ANALYZER_LLM_TEMPERATURE: Sampling temperature (0.0-1.0)
        BUDGET_ANALYZER_LLM_TAX_MAX_TOKENS: Output ceiling for the tax call
        BUDGET_ANALYZER_LLM_ANALYSIS_MAX_TOKENS: Output ceiling for the narrative
        BUDGET_ANALYZER_LLM_API_KEY: API key (falls back to ANTHROPIC_API_KEY)
        BUDGET_ANALYZER_LLM_TIMEOUT: Transport timeout in seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_ANALYZER_LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        min_length=1,
        description="Model identifier for both estimation calls",
    )
    temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Sampling temperature for both calls",
    )
    tax_max_tokens: int = Field(
        default=256,
        ge=64,
        le=1024,
        description="Output ceiling for the structured tax estimate",
    )
    analysis_max_tokens: int = Field(
        default=1024,
        ge=256,
        le=4096,
        description="Output ceiling for the budget narrative",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key for the estimation service",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        le=300,
        description="Per-request transport timeout in seconds",
    )

    @field_validator("model", mode="before")
    @classmethod
    def strip_model(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class BudgetAnalyzerConfig(BaseSettings):
    """Root configuration for the Budget Analyzer.

    Environment Variables:
        BUDGET_ANALYZER_ENV: Environment name (development, staging, production, test)
        BUDGET_ANALYZER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        config = BudgetAnalyzerConfig(
            log_level="DEBUG",
            llm=LLMConfig(model="claude-3-5-haiku-latest"),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_ANALYZER_",
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

    llm: LLMConfig = Field(default_factory=LLMConfig)

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
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"
