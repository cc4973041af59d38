from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "SALONPOS-CHECKOUT"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite+pysqlite:///./salonpos.db"
    CHECKOUT_SESSION_TTL_SECONDS: int = 30 * 60
    CHECKOUT_SESSION_KEY_PREFIX: str = "checkout:session:"
    CHECKOUT_PAYMENT_TOLERANCE: Decimal = Decimal("0.01")
    METRICS_ENABLED: bool = True

settings = Settings()
