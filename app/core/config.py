"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Inventory Ledger API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./inventory.db")
    session_ttl_hours: int = int(getenv("SESSION_TTL_HOURS", "24"))
    session_cookie_name: str = getenv("SESSION_COOKIE_NAME", "session_token")
    session_cookie_secure: bool = getenv("SESSION_COOKIE_SECURE", "0") == "1"
    admin_user: str = getenv("ADMIN_USER", "admin")
    admin_pass: str = getenv("ADMIN_PASS", "")
    admin_full_name: str = getenv("ADMIN_FULL_NAME", "Administrator")
    audit_log_default_limit: int = int(getenv("AUDIT_LOG_DEFAULT_LIMIT", "50"))
    audit_log_max_limit: int = int(getenv("AUDIT_LOG_MAX_LIMIT", "500"))
    asset_page_default_limit: int = int(getenv("ASSET_PAGE_DEFAULT_LIMIT", "10"))
    legacy_json_path: str = getenv("LEGACY_JSON_PATH", "")


settings: Settings = Settings()
