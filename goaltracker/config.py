from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    api_key: str = "dev-key"
    database_url: str = "sqlite:///goals.db"

    # "sql" persists snapshots through database_url; "memory" keeps them for the process lifetime
    storage_backend: str = "sql"

    log_level: str = "INFO"

    # load .env, ignore unknown keys so new vars don't break boot
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

def get_settings() -> Settings:
    """Fresh read of env/.env; the app factory uses this so tests can override env vars."""
    return Settings()

settings = Settings()
