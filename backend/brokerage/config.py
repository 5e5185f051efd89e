from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    # Database (contact inquiries, newsletter subscriptions)
    database_url: str = "sqlite:///./brokerage.db"

    # Sanity CMS
    sanity_project_id: str = ""
    sanity_dataset: str = "production"
    sanity_api_version: str = "2023-05-03"
    sanity_token: Optional[str] = None  # Only needed for private datasets / drafts
    sanity_use_cdn: bool = True
    sanity_timeout_seconds: float = 10.0

    # Content revalidation window, in seconds (0 disables caching)
    content_revalidate_seconds: int = 60

    # Listings
    placeholder_image_url: str = "/placeholder.svg"

    # Email (contact form + newsletter notifications)
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    email_from: Optional[str] = None
    email_to: Optional[str] = None

    # CORS
    frontend_url: str = "http://localhost:3000"
    extra_cors_origins: str = ""

    # Logging
    log_level: str = "INFO"
    log_file: str = "logs/app.log"  # Path relative to backend dir; empty to disable file logging

    @property
    def cors_origins(self) -> List[str]:
        origins = [self.frontend_url]
        origins.extend(o.strip() for o in self.extra_cors_origins.split(",") if o.strip())
        return origins

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_username and self.smtp_password and self.email_from and self.email_to)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
