# Application configuration, loaded from environment variables and .env
from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    model_config = ConfigDict(extra="ignore", env_file=".env")

    # 1. Firebase
    FIREBASE_SERVICE_ACCOUNT_KEY_PATH: str = "serviceAccountKey.json"
    FIREBASE_STORAGE_BUCKET: str | None = None

    # 2. CORS (comma separated)
    FRONTEND_ORIGIN: str = ""

    # 3. Email relay -> Resend
    RESEND_API_KEY: str | None = None
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_FROM: str = "EduWallet <notifications@resend.dev>"
    EMAIL_RELAY_URL: str = "http://localhost:8000/api/v1/email/send"
    EMAIL_TIMEOUT_SECONDS: float = 15.0

    # 4. Alerts
    DEFAULT_MONTHLY_BUDGET_LIMIT: Decimal = Decimal("1000")
    ALERT_SUPPRESSION: Literal["none", "monthly"] = "none"

    # 5. Weekly report job
    WEEKLY_REPORT_ENABLED: bool = True
    SCHEDULER_TIMEZONE: str = "Asia/Kolkata"

    LOG_LEVEL: str = "INFO"


settings = Settings()
