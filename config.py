import os


def _env_flag(name, default="true"):
    return os.environ.get(name, default).strip().lower() not in ("0", "false", "no", "off")


class Config:
    """Configuration settings for the Spotter Network report loader"""

    APP_NAME = "sn_loader"

    # Spotter Network feed
    SPOTTER_FEED_URL = os.environ.get(
        "SPOTTER_FEED_URL", "http://www.spotternetwork.org/feeds/reports.txt"
    )
    USER_AGENT = os.environ.get("SPOTTER_USER_AGENT", "sigtor.org")
    REQUEST_TIMEOUT = int(os.environ.get("REQUEST_TIMEOUT", "30"))

    # Ingestion Settings
    POLLING_INTERVAL_SECONDS = int(os.environ.get("POLLING_INTERVAL_SECONDS", "60"))
    SCHEDULER_ENABLED = _env_flag("SCHEDULER_ENABLED")

    # Database Configuration
    DATABASE_URL = os.environ.get("DATABASE_URL", "postgresql://localhost/spotter_reports")

    SESSION_SECRET = os.environ.get("SESSION_SECRET", "dev-secret-key-change-in-production")

    # Logging Configuration
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    @classmethod
    def as_dict(cls):
        """Loggable view of the settings (no secrets)"""
        return {
            'app_name': cls.APP_NAME,
            'api_url': cls.SPOTTER_FEED_URL,
            'poll_interval_seconds': cls.POLLING_INTERVAL_SECONDS,
            'user_agent': cls.USER_AGENT,
            'request_timeout': cls.REQUEST_TIMEOUT,
            'scheduler_enabled': cls.SCHEDULER_ENABLED,
            'log_level': cls.LOG_LEVEL,
        }

    @classmethod
    def validate(cls):
        """Validate configuration settings"""
        if not cls.SPOTTER_FEED_URL:
            raise ValueError("SPOTTER_FEED_URL environment variable is required")

        if not cls.DATABASE_URL:
            raise ValueError("DATABASE_URL environment variable is required")

        if cls.POLLING_INTERVAL_SECONDS <= 0:
            raise ValueError("POLLING_INTERVAL_SECONDS must be positive")

        return True
