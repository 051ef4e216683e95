from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Preferred for webhook writes; bypasses RLS
    supabase_timeout_seconds: float = 10.0

    # GitHub
    github_token: Optional[str] = None
    github_webhook_secret: Optional[str] = None
    github_api_url: str = "https://api.github.com"
    github_workflow_file: str = "deploy.yml"
    default_ref: str = "main"
    http_timeout_seconds: float = 15.0

    # Preview deployments, one subdomain per branch
    preview_domain: str = "pushdeploy.ml"

    # App
    app_name: str = "pushdeploy-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
