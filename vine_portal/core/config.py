from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://vine:vine@db:5432/vine"
    # Service-role connection (bypasses row-level security). Only opened after
    # the gateway has authorized the caller. Falls back to DATABASE_URL.
    SERVICE_DATABASE_URL: str = ""
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str = ""
    AUTH_TIMEOUT_SECONDS: float = 5.0

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://vinechurch.ca,https://www.vinechurch.ca"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def service_database_url(self) -> str:
        return self.SERVICE_DATABASE_URL or self.DATABASE_URL


settings = Settings()
