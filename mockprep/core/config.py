from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Viewer's local time zone; the booking form labels dates in IST.
    TIMEZONE: str = "Asia/Kolkata"

    SCHEDULING_API_BASE_URL: str | None = None
    SCHEDULING_API_TIMEOUT_SECONDS: float = 10.0

    SLOT_PRICE: str = "399.00"
    SLOT_CURRENCY: str = "₹"

    BOOKING_WINDOW_DAYS: int = 7
    SLOT_DURATION_MINUTES: int = 60
    COUNTDOWN_TICK_SECONDS: float = 1.0

    REFUND_CUTOFF_HOURS: int = 3
    REFUND_PERCENT: int = 50

    DEFAULT_INTERVIEW_MODE: str = "ONLINE"


settings = Settings()
