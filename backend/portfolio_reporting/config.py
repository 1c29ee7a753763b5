from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_env: str = "local"  # local|dev|prod
    database_url: str = "sqlite:///./portfolio_reporting.db"
    report_version: str = "2026-10-01.v1"

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Report cache ----
    report_cache_ttl_seconds: float = 300.0  # 5 minutes

    # ---- P&L window ----
    pl_default_month_count: int = 6
    pl_max_month_count: int = 36

    def model_post_init(self, __context) -> None:
        if self.report_cache_ttl_seconds < 0:
            raise ValueError("report_cache_ttl_seconds cannot be negative")
        if not (1 <= self.pl_default_month_count <= self.pl_max_month_count):
            raise ValueError("pl_default_month_count must be between 1 and pl_max_month_count")

        env = (self.app_env or "local").strip().lower()
        if env in ("prod", "production"):
            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")


settings = Settings()
