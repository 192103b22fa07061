"""Engine Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


# Canonical unit -> free-text labels seen in the catalog
DEFAULT_UNIT_ALIASES: dict[str, list[str]] = {
    "200ml": ["200 ml", "200ml", "0.2l", "200 mltr"],
    "250ml": ["250 ml", "250ml", "0.25l", "250 mltr", "quarter litre"],
    "500ml": ["500 ml", "500ml", "0.5l", "0.5 ltr", "half litre", "half liter", "500 mltr"],
    "1L": ["1l", "1 l", "1 ltr", "1 ltrs", "1 litre", "1 liter", "1000ml", "1000 ml"],
    "2L": ["2l", "2 l", "2 ltr", "2 ltrs", "2 litre", "2 liter", "2000ml", "2000 ml"],
    "5L": ["5l", "5 l", "5 ltr", "5 ltrs", "5 litre", "5 liter", "5000ml"],
    "250g": ["250g", "250 g", "250 gm", "250 gms", "250 grams", "0.25kg"],
    "500g": ["500g", "500 g", "500 gm", "500 gms", "500 grams", "0.5kg", "half kg"],
    "1kg": ["1kg", "1 kg", "1 kgs", "1000g", "1000 g", "1000 gm", "1 kilogram"],
}


class Settings(BaseSettings):
    """Engine settings loaded from environment"""

    # Application
    app_name: str = "Depot Cart Engine"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8002

    # Catalog service; empty means the bundled in-memory catalog is used
    catalog_base_url: Optional[str] = None
    catalog_timeout: float = 10.0
    catalog_max_retries: int = 2

    # Cart persistence
    cart_storage_path: Optional[str] = None
    cart_storage_key: str = "cart"

    # Reconciliation
    enforce_closing_qty: bool = False

    # Delivery schedule
    schedule_lookahead_days: int = 14
    schedule_dates_per_weekday: int = 1

    unit_aliases: dict[str, list[str]] = DEFAULT_UNIT_ALIASES

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def uses_remote_catalog(self) -> bool:
        """Check if a remote catalog service is configured"""
        return bool(self.catalog_base_url)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
