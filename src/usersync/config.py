"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # System Configuration
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000"

    # Webhook Configuration
    # Signing secret from the Clerk dashboard (whsec_...). Required at request time.
    webhook_secret: str | None = None
    webhook_path: str = "/api/webhooks/clerk"

    # Supabase Configuration
    supabase_url: str = "https://test.supabase.co"
    supabase_service_role_key: str = "test-service-role-key"
    users_table: str = "users"

    # Clerk Backend API Configuration
    clerk_api_url: str = "https://api.clerk.com/v1"
    clerk_secret_key: str | None = None
    clerk_timeout_seconds: float = 10.0
    clerk_max_retries: int = 3

    # PostHog Configuration
    posthog_api_key: str | None = None
    posthog_host: str = "https://app.posthog.com"


settings = Settings()
