"""Pydantic models describing the user configuration file."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConfigurationError(ValueError):
    """Raised when the configuration file cannot be read or violates the schema."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and accepts YAML-style key aliases."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class ConfigDefaults(ImmutableModel):
    """Fallback values consulted when a flag is not supplied on the command line.

    ``income`` is accepted so older configuration files keep loading, but gross
    wage is always mandatory per scenario and never falls back to it.
    """

    region: str = "uk"
    year: str = ""
    age: str = "0"
    pension: str = ""
    student_loan: str = Field(default="", alias="student-loan")
    tax_code: str = Field(default="", alias="tax-code")
    extra: int = 0
    period: str = "yearly"
    income: int = 0
    married: bool = False
    blind: bool = False
    no_ni: bool = Field(default=False, alias="no-ni")
    partner_income: int = Field(default=0, alias="partner-income")

    @field_validator(
        "region",
        "year",
        "age",
        "pension",
        "student_loan",
        "tax_code",
        "period",
        mode="before",
    )
    @classmethod
    def _coerce_scalar_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, bool):
            raise ConfigurationError("Expected text, found a boolean")
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("extra", "income", "partner_income", mode="before")
    @classmethod
    def _coerce_blank_numbers(cls, value: Any) -> Any:
        if value is None or value == "":
            return 0
        return value

    @field_validator("married", "blind", "no_ni", mode="before")
    @classmethod
    def _coerce_blank_flags(cls, value: Any) -> Any:
        if value is None or value == "":
            return False
        return value


class Configuration(ImmutableModel):
    """Top-level configuration document."""

    defaults: ConfigDefaults = Field(default_factory=ConfigDefaults)

    @field_validator("defaults", mode="before")
    @classmethod
    def _coerce_empty_section(cls, value: Any) -> Any:
        if value is None:
            return {}
        return value


__all__ = ["ConfigDefaults", "Configuration", "ConfigurationError", "ImmutableModel"]
