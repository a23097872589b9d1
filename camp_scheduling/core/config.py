# camp_scheduling/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Values come from the process environment (Docker Compose / CI).
    model_config = SettingsConfigDict(extra="ignore")

    # The environment mode: 'local' or 'prod'
    ENV: str = "local"

    # --- Production URLs (for inside Docker) ---
    DATABASE_URL_PROD: str = ""
    KAFKA_BOOTSTRAP_SERVERS_PROD: str = ""

    # --- Local Development URLs (for running locally) ---
    DATABASE_URL_LOCAL: str = "sqlite:///./camp_scheduling.db"
    KAFKA_BOOTSTRAP_SERVERS_LOCAL: str = ""

    # Other secrets
    JWT_SECRET: str = "change-me"

    LOG_LEVEL: str = "INFO"

    # Topic consumed by the messaging service for booking notifications
    SLOT_EVENTS_TOPIC: str = "camp.slot-bookings.v1"

    # --- Dynamic Properties ---
    # These properties return the correct URL based on the ENV
    @property
    def DATABASE_URL(self) -> str:
        return (
            self.DATABASE_URL_LOCAL if self.ENV == "local" else self.DATABASE_URL_PROD
        )

    @property
    def KAFKA_BOOTSTRAP_SERVERS(self) -> str:
        return (
            self.KAFKA_BOOTSTRAP_SERVERS_LOCAL
            if self.ENV == "local"
            else self.KAFKA_BOOTSTRAP_SERVERS_PROD
        )


# Create a single instance of the settings
settings = Settings()
