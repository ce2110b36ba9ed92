"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import Optional

from .rounding import RoundingMode, coerce_rounding_mode


class MoneyConfig(BaseSettings):
    """moneykit configuration"""
    
    # Formatting configuration
    default_locale: str = "en_GB"  # Used when no locale is passed to locale formatting
    
    # Arithmetic configuration
    default_rounding_mode: RoundingMode = RoundingMode.HALF_UP
    
    # Currency data configuration
    currency_table: Optional[str] = None  # If None, the packaged ISO 4217 table is used
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    
    @field_validator("default_locale")
    @classmethod
    def _normalize_locale(cls, value: str) -> str:
        return value.strip().replace("-", "_")
    
    @field_validator("default_rounding_mode", mode="before")
    @classmethod
    def _parse_rounding_mode(cls, value):
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value)
        return coerce_rounding_mode(value)
    
    class Config:
        env_prefix = "MONEYKIT_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = MoneyConfig()


def get_config() -> MoneyConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> MoneyConfig:
    """Reload configuration from environment"""
    global config
    config = MoneyConfig()
    return config
