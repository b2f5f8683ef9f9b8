"""
Application Configuration
从环境变量加载配置
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Environment
    ENVIRONMENT: str = "development"

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Reject timeouts/latencies that would stall or skip the pipeline"""
        for name in (
            "TRANSLATION_TIMEOUT",
            "ANSWER_TIMEOUT",
            "DISPATCH_TIMEOUT",
            "DEVICE_CONNECT_TIMEOUT",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        for name in (
            "TRANSLATION_LATENCY",
            "ANSWER_LATENCY",
            "DISPATCH_LATENCY",
            "DEVICE_CONNECT_LATENCY",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.ENVIRONMENT == "production" and self.DEBUG:
            raise ValueError("DEBUG must be disabled in production!")
        return self

    DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"  # DEBUG, INFO, WARNING, ERROR

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:8080",
        "capacitor://localhost",  # Mobile shell
        "http://127.0.0.1:5173",
    ]

    # Speech recognition (configured on the client, Arabic input)
    RECOGNITION_LANG: str = "ar-SA"
    RECOGNITION_CONTINUOUS: bool = True
    RECOGNITION_INTERIM_RESULTS: bool = True
    # 是否处理 interim 转录（false 时只处理 final）
    PROCESS_INTERIM_TRANSCRIPTS: bool = True

    # Simulated latency of the external calls (seconds)
    TRANSLATION_LATENCY: float = 1.0
    ANSWER_LATENCY: float = 1.5
    DISPATCH_LATENCY: float = 0.5
    DEVICE_CONNECT_LATENCY: float = 2.0

    # Timeouts imposed on each external call (seconds)
    TRANSLATION_TIMEOUT: float = 10.0
    ANSWER_TIMEOUT: float = 15.0
    DISPATCH_TIMEOUT: float = 5.0
    DEVICE_CONNECT_TIMEOUT: float = 10.0

    # Wearable display
    DEVICE_NAME: str = "G1 Glasses"

    # Speech output (English answers)
    SPEECH_LANG: str = "en-US"
    DEFAULT_TTS_PROVIDER: str = "edge"
    DEFAULT_TTS_VOICE: str = "en-US-JennyNeural"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
