"""Configuration management for API Catálogo."""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Application configuration."""

    # Application
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production").strip().lower()
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./apicatalogo.db")

    # Catalog
    PRODUCTS_PER_CATEGORY: int = int(os.getenv("PRODUCTS_PER_CATEGORY", "5"))

    @property
    def is_development(self) -> bool:
        """Whether the interactive API documentation should be exposed."""
        return self.ENVIRONMENT == "development"


config = Config()
