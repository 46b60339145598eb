from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./data/rooms_booking.db"

    # Pool bounds are handed to create_engine unchanged (ignored for SQLite)
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    JWT_SECRET: str = "secure-secret-key-1234567890"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_SECONDS: int = 86400  # 24 hours

    BCRYPT_ROUNDS: int = 12

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    ROOM_DELETE_CASCADE: bool = True
    REJECT_OVERLAPPING_BOOKINGS: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
