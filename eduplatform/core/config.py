from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # empty is allowed here so imports never fail; the engine build rejects it
    DATABASE_URL: str = ""
    EMAIL_SERVICE_URL: str | None = None
    EMAIL_CONNECT_TIMEOUT_SEC: float = 10.0
    EMAIL_READ_TIMEOUT_SEC: float = 10.0
    APP_NAME: str = "EduPlatform"
    PASSWORD_RESET_CODE_MINUTES: int = 15
    LOG_LEVEL: str = "INFO"
    LOG_SAMPLE_RATE: float = 1.0  # 0..1
    ENABLE_DEBUG_ENDPOINTS: bool = False

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @field_validator("EMAIL_SERVICE_URL")
    @classmethod
    def _blank_is_unset(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

settings = Settings()
