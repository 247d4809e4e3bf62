"""Configuration management using Pydantic Settings"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./coop_ledger.db"
    create_tables_on_startup: bool = True

    # Service
    service_name: str = "coop-ledger"
    log_level: str = "INFO"

    # Cooperative defaults
    default_cooperative_id: int = 1
    tracts_per_year: int = 3
    default_required_amount: Decimal = Decimal("300.00")

    # Fiscal calendar: year N runs from fiscal_year_start_month of N to the month before in N+1
    fiscal_year_start_month: int = 10
    min_fiscal_year: int = 2000
    max_fiscal_year: int = 2100


settings = Settings()
