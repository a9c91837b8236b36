"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings


class MinibankConfig(BaseSettings):
    """Minibank configuration"""
    
    # Persistence configuration
    data_file: str = "db/data.json"
    
    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 4567
    
    # Business rules configuration
    max_transaction_amount: str = "1000000000.00"
    max_balance: str = "9999999999999.99"  # 15 significant digits, exact as a JSON float

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    
    class Config:
        env_prefix = "MINIBANK_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = MinibankConfig()


def get_config() -> MinibankConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> MinibankConfig:
    """Reload configuration from environment"""
    global config
    config = MinibankConfig()
    return config
