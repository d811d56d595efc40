"""Configuration management and environment variable loading."""

import os
from pathlib import Path
from dotenv import load_dotenv

from yt2md.errors import ConfigurationError

# Load environment variables from .env file (don't override existing env vars)
load_dotenv(override=False)


class Config:
    """Application configuration."""
    
    # Generative-text service (Gemini through its OpenAI-compatible endpoint)
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
    FORMAT_MODEL: str = os.getenv("FORMAT_MODEL", "gemini-2.5-flash")
    FORMAT_BASE_URL: str = os.getenv(
        "FORMAT_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/"
    )
    FORMAT_TEMPERATURE: float = float(os.getenv("FORMAT_TEMPERATURE", "0.3"))
    FORMAT_MAX_TOKENS: int = int(os.getenv("FORMAT_MAX_TOKENS", "32000"))
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "2"))
    
    # Speech-to-Text / Cloud Storage
    GOOGLE_OAUTH2_CLIENT_ID: str = os.getenv("GOOGLE_OAUTH2_CLIENT_ID", "")
    GOOGLE_OAUTH2_CLIENT_SECRET: str = os.getenv("GOOGLE_OAUTH2_CLIENT_SECRET", "")
    GOOGLE_CLOUD_PROJECT: str = os.getenv("GOOGLE_CLOUD_PROJECT") or os.getenv("GCP_PROJECT", "")
    OAUTH_PORT: int = int(os.getenv("OAUTH_PORT", "8080"))
    OAUTH_TIMEOUT: int = int(os.getenv("OAUTH_TIMEOUT", "300"))
    POLL_INTERVAL: float = float(os.getenv("POLL_INTERVAL", "5"))
    # 0 disables the deadline
    OPERATION_TIMEOUT: float = float(os.getenv("OPERATION_TIMEOUT", "7200"))
    
    # Artifacts land in OUT_DIR/<video_id>/
    OUT_DIR: Path = Path(os.getenv("OUT_DIR", ".")).resolve()
    
    @classmethod
    def validate_formatter(cls) -> None:
        """Validate that the formatter's API key is present."""
        if not cls.GOOGLE_API_KEY:
            raise ConfigurationError(
                "GOOGLE_API_KEY is required. Please set it in your .env file or environment variables."
            )
    
    @classmethod
    def validate_speech(cls) -> None:
        """Validate the OAuth client and project used by the speech path."""
        if not cls.GOOGLE_OAUTH2_CLIENT_ID or not cls.GOOGLE_OAUTH2_CLIENT_SECRET:
            raise ConfigurationError(
                "GOOGLE_OAUTH2_CLIENT_ID and GOOGLE_OAUTH2_CLIENT_SECRET must be set in your .env file."
            )
        if not cls.GOOGLE_CLOUD_PROJECT:
            raise ConfigurationError("GOOGLE_CLOUD_PROJECT environment variable not set")
