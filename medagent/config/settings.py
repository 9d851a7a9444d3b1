"""Application configuration and settings."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service Configuration
    service_name: str = "medagent"
    port: int = 8010
    environment: str = "development"
    cors_allowed_origins: str = "http://localhost:5173"

    # Gemini generateContent API (key is injected via environment only)
    gemini_api_key: Optional[SecretStr] = None
    gemini_api_url: str = (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-pro:generateContent"
    )
    advisory_timeout_seconds: float = 15.0
    advisory_include_patient_name: bool = True
    advisory_max_words: int = 80

    # Intake validation
    age_min: int = 5
    age_max: int = 99

    # Risk rules
    critical_symptom: str = "shortness_breath"
    high_risk_symptom_count: int = 4
    moderate_risk_symptom_count: int = 2

    # Wizard flow (0 disables the timed risk -> consultation transition)
    auto_advance_seconds: float = 0.0
    # Sessions untouched for this long are dropped (0 keeps them until closed)
    session_idle_minutes: float = 30.0

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    @property
    def has_gemini_key(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.get_secret_value())


# Global settings instance
settings = Settings()
