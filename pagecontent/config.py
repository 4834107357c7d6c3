from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "Silk Bridge Content"
    SECRET_KEY: str = "change-me-in-production"
    DATABASE_URL: str = "sqlite:///./pagecontent.db"
    DEFAULT_LANG: str = "en"
    BASE_URL: str = "http://localhost:8000"
    # "development" bypasses the content cache so edits show up immediately
    ENVIRONMENT: str = "production"
    LOCALES_REVALIDATE_SECONDS: int = 3600
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def cache_enabled(self) -> bool:
        return self.ENVIRONMENT.lower() != "development"


settings = Settings()
