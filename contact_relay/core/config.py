from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional

class Settings(BaseSettings):
    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # MongoDB - submissions are not saved when the URI is missing
    mongodb_uri: Optional[str] = None
    mongodb_db: str = "one20minutes"

    # Comma-separated allow-list, empty means allow all
    cors_origin: str = ""

    # SMTP relay - all of host/user/pass/to/from are needed to send mail
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_secure: bool = False
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    to_email: Optional[str] = None
    from_email: Optional[str] = None

    # Filesystem
    uploads_dir: str = "uploads"
    static_dir: Optional[str] = "public"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def cors_origins(self) -> List[str]:
        """Parsed CORS allow-list, ["*"] when nothing is configured"""
        origins = [origin.strip() for origin in self.cors_origin.split(",")]
        origins = [origin for origin in origins if origin]
        return origins or ["*"]

@lru_cache
def get_settings():
    return Settings()
