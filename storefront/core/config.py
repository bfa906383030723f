"""
Application configuration.
All settings are loaded from environment variables.
Use env.example as a reference for the available variables.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Gateway credentials default to empty strings so the catalog can be served
    without them; order creation fails with an upstream error until they are set.
    """

    # ===========================================
    # APPLICATION
    # ===========================================
    app_env: str = "local"
    port: int = 3000
    # Public URL used to build download links. Empty = http://localhost:{port}
    base_url: str = ""
    # Comma-separated. Empty = default list in storefront.main
    cors_origins: str = ""
    # Browser UI directory, mounted at / when it exists
    static_dir: str = "public"

    # ===========================================
    # DATABASE
    # ===========================================
    database_url: str = "sqlite:///./data/storefront.db"

    # ===========================================
    # RAZORPAY
    # ===========================================
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    razorpay_api_url: str = "https://api.razorpay.com/v1"
    currency: str = "INR"

    # ===========================================
    # CATALOG & DOWNLOADS
    # ===========================================
    downloads_dir: str = "downloads"
    # Optional JSON file with the initial product list (used only for an empty catalog)
    products_seed_file: str | None = None
    download_token_ttl_min: int = 60
    # True = token is invalidated after the first successful download
    download_single_use: bool = False

    # ===========================================
    # ADMIN API
    # ===========================================
    # /admin/* answers 503 while this is unset
    admin_api_key: str | None = None

    # ===========================================
    # HTTP CLIENT & CIRCUIT BREAKER
    # ===========================================
    http_client_timeout: float = 10.0
    cb_failure_threshold: int = 5
    cb_open_seconds: int = 30

    # ===========================================
    # LOGGING
    # ===========================================
    log_level: str = "INFO"
    request_id_header: str = "X-Request-Id"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("download_token_ttl_min")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("download_token_ttl_min must be positive")
        return v

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def public_base_url(self) -> str:
        """Base URL without trailing slash."""
        url = self.base_url.strip() or f"http://localhost:{self.port}"
        return url.rstrip("/")

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
