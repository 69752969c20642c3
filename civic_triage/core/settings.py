"""
Core settings and environment variables for Civic Triage.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Civic Triage"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - comma separated list of allowed origins
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8081,http://localhost:19006"

    # Firebase (Firestore + Cloud Messaging)
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON

    # In-memory store for local development without Firebase credentials
    USE_MOCK_DB: bool = False

    # Report analysis
    AI_ENABLED: bool = True  # If False, only the keyword heuristic is used
    AI_PROVIDER: str = "heuristic"  # "heuristic" or "gemini"
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash"
    AI_TIMEOUT_SECONDS: float = 10.0

    # Location enrichment
    # - GEOCODING_PROVIDER: "placeholder" (default, fixed values), "nominatim" or "google"
    # - GOOGLE_MAPS_API_KEY: only used when provider is "google"
    GEOCODING_PROVIDER: str = "placeholder"
    GOOGLE_MAPS_API_KEY: Optional[str] = None
    GEOCODING_USER_AGENT: str = "civic-triage/0.1"

    # Push notifications
    # When disabled, notifications are logged instead of sent through FCM.
    NOTIFICATIONS_ENABLED: bool = True
    AUTHORITIES_TOPIC: str = "authorities"

    # Location queries
    NEARBY_RADIUS_KM: float = 5.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    @property
    def cors_origins(self) -> list:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
