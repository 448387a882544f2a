from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./subtrack.db"
    debug: bool = True

    # JWT settings
    secret_key: str = "subtrack-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # Currency settings
    reference_currency: str = "NOK"
    rate_source_base: str = "USD"
    supported_currencies: list[str] = ["USD", "EUR"]
    exchange_rate_api_url: str = "https://api.frankfurter.app/latest"
    exchange_rate_timeout_seconds: float = 10.0

    # Last-known rates to the reference currency, used when the rate table has no row
    fallback_rates: dict[str, float] = {"USD": 10.5, "EUR": 11.5}
    default_fallback_rate: float = 1.0  # codes with no known rate are treated at parity

    # Dashboard headline window, wider than the urgent display threshold
    renewing_soon_days: int = 5

    # Scheduler settings
    enable_scheduler: bool = True
    exchange_rate_refresh_hour: int = 6  # Hour in UTC to run daily rate refresh

    class Config:
        env_file = ".env"


settings = Settings()
