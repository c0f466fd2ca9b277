from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    APP_NAME: str = "Marketplace API"
    LOG_LEVEL: str = "INFO"

    # Comma separated list of allowed origins
    CORS_ORIGINS: str = "http://localhost:3000"

    # Listing pictures and profile photos
    UPLOAD_DIR: str = "./uploads"
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024  # 5MB

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def sync_database_url(self) -> str:
        """DATABASE_URL with a synchronous driver, for Alembic."""
        return (
            self.DATABASE_URL
            .replace("postgresql+asyncpg://", "postgresql+psycopg2://")
            .replace("sqlite+aiosqlite://", "sqlite://")
        )


settings = Settings()
