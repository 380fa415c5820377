"""Configuration management for the autons application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

class Config:
    """Application configuration with sensible defaults."""

    # Executable the resolved command is delegated to
    KUBECTL: str = os.getenv("AUTONS_KUBECTL", "kubectl")

    # Timeout for every API server call (in seconds)
    API_TIMEOUT: float = float(os.getenv("AUTONS_API_TIMEOUT", "30"))

    # Parallel listing calls per group/version (1 = sequential)
    MAX_WORKERS: int = int(os.getenv("AUTONS_MAX_WORKERS", "1"))

    # Logging. WARNING keeps the wrapper quiet in front of kubectl output.
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @classmethod
    def validate(cls) -> None:
        """Validate numeric configuration."""
        if cls.API_TIMEOUT <= 0:
            raise ValueError(f"AUTONS_API_TIMEOUT must be positive, got {cls.API_TIMEOUT}")
        if cls.MAX_WORKERS < 1:
            raise ValueError(f"AUTONS_MAX_WORKERS must be at least 1, got {cls.MAX_WORKERS}")
