"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings


class BankingConfig(BaseSettings):
    """Basic banking configuration"""

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Display configuration
    currency_symbol: str = "$"

    # Checking account configuration
    account_number_prefix: str = "CHK"
    first_check_number: int = 1

    # Feature flags
    enable_events: bool = True

    class Config:
        env_prefix = "BANKING_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = BankingConfig()


def get_config() -> BankingConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> BankingConfig:
    """Reload configuration from environment"""
    global config
    config = BankingConfig()
    return config
