"""
Application configuration using pydantic-settings.

WHAT: Centralized config from environment variables
WHY: Type-safe paths, pricing knobs and timeouts with sensible defaults
HOW: Pydantic BaseSettings reads from .env and environment
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""
    
    # App metadata
    APP_NAME: str = "OpenKore Vending Planner"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    
    # Vendor identity
    VENDOR_ID: str = "vendor_1"
    SHOP_NAME: str = "Cheap Stuff"
    
    # OpenKore process
    OPENKORE_HOME: str = "./openkore"
    OPENKORE_COMMAND: str = "perl openkore.pl"
    CONSOLE_LOG_PATH: str = "logs/console.txt"
    SHOP_CONFIG_PATH: str = "control/shop.txt"
    CART_WAIT_SECONDS: float = 25.0  # time the bot needs to log in and print its cart
    INIT_ON_STARTUP: bool = False
    
    # Price data
    PRICE_TABLE_PATH: str = "./data/prices.json"
    PRICE_CACHE_TTL_SECONDS: int = 600  # 0 disables the cache
    PRICE_LOOKUP_CONCURRENCY: int = 4
    
    # Pricing policy (integer percentages keep prices deterministic)
    MARKUP_PCT: int = 0
    BULK_THRESHOLD: int = 0  # 0 disables bulk discount
    BULK_DISCOUNT_PCT: int = 0
    FALLBACK_PRICE: Optional[int] = None  # None skips items without price data
    
    # CORS - comma-separated string
    CORS_ORIGINS: str = "http://localhost:3000"
    
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "./data/logs/vending.log"
    
    @field_validator("MARKUP_PCT", "BULK_DISCOUNT_PCT")
    @classmethod
    def validate_percentages(cls, v: int, info) -> int:
        """Reject percentages that would produce non-positive prices."""
        if info.field_name == "BULK_DISCOUNT_PCT" and not 0 <= v < 100:
            raise ValueError("BULK_DISCOUNT_PCT must be in [0, 100)")
        if info.field_name == "MARKUP_PCT" and v <= -100:
            raise ValueError("MARKUP_PCT must be greater than -100")
        return v
    
    def get_cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Singleton instance
settings = Settings()
