"""Pydantic models for rebalancer configuration with validation."""

from decimal import Decimal
from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator


class CommissionConfig(BaseModel):
    """Brokerage commission schedule."""

    minimum_price: Decimal = Field(
        default=Decimal("12"),
        ge=0,
        description="Share price below which the flat per-share fee applies"
    )
    fixed_rate: Decimal = Field(
        default=Decimal("0.03"),
        ge=0,
        le=100,
        description="Flat fee charged per share for low-priced shares"
    )
    percentage_rate: Decimal = Field(
        default=Decimal("0.0025"),
        ge=0,
        lt=1,
        description="Commission as a fraction of trade value (e.g., 0.0025 for 0.25%)"
    )


class ValidationConfig(BaseModel):
    """Bounds applied by the input validators."""

    minimum_cash_amount: Decimal = Field(
        default=Decimal("0"),
        description="Smallest cash amount accepted for a rebalance"
    )
    maximum_cash_amount: Decimal = Field(
        default=Decimal("1000000000"),
        gt=0,
        description="Largest cash amount accepted for a rebalance"
    )
    minimum_shares: int = Field(
        default=0,
        description="Smallest accepted share count"
    )
    maximum_shares: int = Field(
        default=1_000_000_000,
        gt=0,
        description="Largest accepted share count"
    )
    minimum_price: Decimal = Field(
        default=Decimal("0.01"),
        description="Smallest accepted share price"
    )
    maximum_price: Decimal = Field(
        default=Decimal("1000000"),
        gt=0,
        description="Largest accepted share price"
    )
    minimum_weight: Decimal = Field(
        default=Decimal("0"),
        description="Smallest accepted index weight (as fraction)"
    )
    maximum_weight: Decimal = Field(
        default=Decimal("1"),
        description="Largest accepted index weight (as fraction)"
    )
    min_symbol_length: int = Field(
        default=1,
        ge=0,
        description="Shortest accepted ticker symbol"
    )
    max_symbol_length: int = Field(
        default=10,
        gt=0,
        description="Longest accepted ticker symbol"
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "ValidationConfig":
        """Ensure every minimum is not above its maximum."""
        pairs = [
            ("minimum_cash_amount", "maximum_cash_amount"),
            ("minimum_shares", "maximum_shares"),
            ("minimum_price", "maximum_price"),
            ("minimum_weight", "maximum_weight"),
            ("min_symbol_length", "max_symbol_length"),
        ]
        for low, high in pairs:
            if getattr(self, low) > getattr(self, high):
                raise ValueError(
                    f"{low} ({getattr(self, low)}) must not exceed {high} ({getattr(self, high)})"
                )
        return self


class LoggingConfig(BaseModel):
    """Logging output settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Console/file record format"
    )
    file_path: Optional[str] = Field(
        default=None,
        description="Log file path; file logging is disabled when unset"
    )
    retained_file_count: int = Field(
        default=31,
        ge=1,
        le=365,
        description="Number of rotated daily log files to keep"
    )


class AppConfig(BaseModel):
    """Root rebalancer configuration."""

    commission: CommissionConfig = Field(
        default_factory=CommissionConfig,
        description="Commission schedule"
    )
    validation: ValidationConfig = Field(
        default_factory=ValidationConfig,
        description="Input validation bounds"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings"
    )
