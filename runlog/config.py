from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")
    DATABASE_URL: str = "sqlite:///./runlog.db"
    ENV: str = "dev"

    STRAVA_CLIENT_ID: str
    STRAVA_CLIENT_SECRET: str
    STRAVA_REFRESH_TOKEN: str | None = None
    STRAVA_SCOPES: str = "read,activity:read_all,activity:write"

    OAUTH_CALLBACK_HOST: str = "localhost"
    OAUTH_CALLBACK_PORT: int = 3000
    OAUTH_TIMEOUT_SECONDS: float = 300
    OAUTH_INTERACTIVE: bool = True
    TOKEN_REFRESH_MARGIN_SECONDS: int = 300

    PRIMARY_ACTIVITY_TYPE: str = "Run"
    FETCH_PER_PAGE: int = 30

    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
