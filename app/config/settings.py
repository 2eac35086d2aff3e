from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    profiles_table: str = "profiles"

    # Auth
    auth_cookie_name: str = "sb-access-token"
    auth_redirect_path: str = "/auth"
    username_min_length: int = 3

    # App
    app_name: str = "profile-dashboard"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    image_domains: str = "fal.media,replicate.delivery"  # Remote hosts allowed in img-src

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_image_domains_list(self) -> List[str]:
        return [d.strip() for d in self.image_domains.split(",") if d.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
