"""
Configuration Management for Budget Buddy

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All tunable behaviour of the engine lives here.
The engine itself has no I/O; the only knobs are how it treats
contract violations and how values are displayed.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class NegativeInputPolicy(str, Enum):
    """What to do with a negative income or allocation."""
    CLAMP = "clamp"    # Store 0 instead
    REJECT = "reject"  # Leave state unchanged


class BudgetSettings(BaseSettings):
    """
    Budget engine settings.

    Loads configuration from BUDGET_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Display
    currency_symbol: str = Field(
        default="₹",
        min_length=1,
        max_length=5,
        description="Symbol prefixed to every displayed amount"
    )

    # Contract violations
    negative_input_policy: NegativeInputPolicy = Field(
        default=NegativeInputPolicy.CLAMP,
        description="How negative income/allocation values are handled"
    )
    strict_validation: bool = Field(
        default=False,
        description="Raise BudgetValidationError instead of ignoring rejected mutations"
    )
    allow_fixed_name_custom_category: bool = Field(
        default=False,
        description="Allow a custom category named Food, Rent or Travel"
    )

    # Numerics
    comparison_tolerance: float = Field(
        default=1e-9,
        ge=0.0,
        le=1e-3,
        description="Amount by which a value must exceed a limit to count as over it"
    )

    # Slider range used by the UI
    slider_max: float = Field(
        default=50000.0,
        gt=0,
        description="Upper bound of allocation sliders"
    )
    slider_step: float = Field(
        default=100.0,
        gt=0,
        description="Step of allocation sliders"
    )

    # Audit trail
    audit_history_limit: int = Field(
        default=200,
        ge=1,
        le=10000,
        description="How many recent audit events are kept in memory"
    )

    @field_validator('currency_symbol')
    @classmethod
    def strip_symbol(cls, v: str) -> str:
        """A symbol made only of whitespace would render amounts ambiguously."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Currency symbol cannot be blank")
        return stripped

    @property
    def slider_range(self) -> tuple[float, float]:
        """(min, max) of allocation sliders."""
        return 0.0, self.slider_max


@lru_cache()
def get_settings() -> BudgetSettings:
    """
    Get budget settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return BudgetSettings()
