"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache
from typing import Optional


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Bountyboard"
    debug: bool = False
    app_base_url: str = "http://localhost:3000"

    # Database (postgresql+psycopg for psycopg3; sqlite accepted for local runs)
    database_url: str = "postgresql+psycopg://localhost:5432/bountyboard_dev"
    db_connect_timeout: int = 10  # seconds

    # Security
    secret_key: str = ""
    access_token_expire_hours: int = 24

    # Exchange rates (CoinMarketCap-compatible quotes API)
    exchange_rate_api_url: str = "https://pro-api.coinmarketcap.com"
    exchange_rate_api_key: Optional[str] = None
    exchange_rate_quote: str = "USDC"
    exchange_rate_timeout: float = 10.0

    # Winner announcement: tolerance when comparing requested amounts to the prize pool
    prize_pool_epsilon: float = 0.01

    # Notifications / SMTP
    notifications_enabled: bool = True
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.app_base_url = os.getenv("APP_BASE_URL", self.app_base_url).rstrip("/")

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'bountyboard_dev')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.secret_key = os.getenv("SECRET_KEY", "")
        self.access_token_expire_hours = int(
            os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", str(self.access_token_expire_hours))
        )

        self.exchange_rate_api_url = os.getenv(
            "EXCHANGE_RATE_API_URL", self.exchange_rate_api_url
        ).rstrip("/")
        self.exchange_rate_api_key = os.getenv("EXCHANGE_RATE_API_KEY")
        self.exchange_rate_quote = os.getenv(
            "EXCHANGE_RATE_QUOTE", self.exchange_rate_quote
        ).upper()
        self.exchange_rate_timeout = float(
            os.getenv("EXCHANGE_RATE_TIMEOUT", str(self.exchange_rate_timeout))
        )

        self.prize_pool_epsilon = float(
            os.getenv("PRIZE_POOL_EPSILON", str(self.prize_pool_epsilon))
        )

        self.notifications_enabled = (
            os.getenv("NOTIFICATIONS_ENABLED", "true").lower() == "true"
        )
        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from = os.getenv("SMTP_FROM", "")
