from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    app_name: str = "ExpenseDashboardAPI"

    cors_origins: str = "http://localhost:5173"

    # upstream expense API (transactions / budgets / categories)
    upstream_api_url: str = "http://localhost:3000"
    upstream_timeout_seconds: float = 30.0

    default_timezone: str = "Asia/Kolkata"

    # Dashboard
    trend_months: int = 6
    recent_transactions_limit: int = 5
    budget_alert_threshold: float = 80.0
    uncategorized_label: str = "Uncategorized"
    # how long a renamed category may still show its old name on the dashboard
    categories_cache_ttl_seconds: int = 60

    log_level: str = "INFO"

    def cors_origin_list(self) -> List[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]


settings = Settings()
