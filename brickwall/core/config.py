from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./brickwall.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    SQL_ECHO: bool = False

    # IANA zone whose midnight separates one brick day from the next.
    TIMEZONE: str = "UTC"

    # Read-modify-write attempts on a BehaviorState before giving up.
    STATE_UPDATE_MAX_RETRIES: int = 3

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
