from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False

    SERVICE_NAME: str = "host-qualification"
    LOG_LEVEL: str = "INFO"

    # =================================================================
    # HOST QUALIFICATION SETTINGS
    # =================================================================
    # Weight assumed for round-robin hosts without an explicit weight
    HOST_QUALIFICATION_DEFAULT_WEIGHT: int = 100

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def log_level(self) -> str:
        """Resolve the effective log level, forcing DEBUG in debug mode."""
        if self.debug:
            return "DEBUG"
        return self.LOG_LEVEL.upper()


settings = Settings()
