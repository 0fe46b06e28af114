from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATA_DIR: str = "league_data"

    SECRET_KEY: str = "CHANGE_ME_SECRET_KEY"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD_HASH: Optional[str] = None # passlib hash, login is refused until set

    IMGBB_API_KEY: Optional[str] = None
    IMGBB_UPLOAD_URL: str = "https://api.imgbb.com/1/upload"
    IMGBB_TIMEOUT_SECONDS: float = 15.0
    MAX_UPLOAD_BYTES: int = 32 * 1024 * 1024

    DEFAULT_CAPACITY: int = 8
    DEFAULT_GROUP_SIZE: int = 4
    QUALIFIERS_PER_GROUP: int = 2
    MIN_PLAYERS: int = 4
    REQUIRE_RESULT_REVIEW: bool = True

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LEAGUE_", extra="ignore")


settings = Settings()
