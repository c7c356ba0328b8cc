"""
Configuration settings for the application.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    PLATFORM_NAME: str = os.getenv("PLATFORM_NAME", "Supplier Portal")
    APP_BASE_URL: str = os.getenv("APP_BASE_URL", "http://localhost:3000")

    # Document store
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "redis")
    STORE_MEMORY_FALLBACK: bool = (
        os.getenv("STORE_MEMORY_FALLBACK", "true").lower() == "true"
    )
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    STORE_KEY_PREFIX: str = os.getenv("STORE_KEY_PREFIX", "portal")

    # Blob storage (Azure)
    AZURE_STORAGE_CONNECTION_STRING: str | None = os.getenv(
        "AZURE_STORAGE_CONNECTION_STRING"
    )
    AZURE_STORAGE_ACCOUNT_NAME: str | None = os.getenv("AZURE_STORAGE_ACCOUNT_NAME")
    AZURE_STORAGE_ACCOUNT_KEY: str | None = os.getenv("AZURE_STORAGE_ACCOUNT_KEY")
    AZURE_STORAGE_CONTAINER: str = os.getenv(
        "AZURE_STORAGE_CONTAINER", "supplier-assets"
    )
    AZURE_SAS_URL: str | None = os.getenv("AZURE_SAS_URL")
    BLOB_KEY_PREFIX: str = os.getenv("BLOB_KEY_PREFIX", "suppliers")

    # Uploads and signed URLs
    SIGNED_URL_EXPIRES_SECONDS: int = int(
        os.getenv("SIGNED_URL_EXPIRES_SECONDS", "3600")
    )
    MAX_IMAGE_BYTES: int = int(os.getenv("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))
    MAX_PDF_BYTES: int = int(os.getenv("MAX_PDF_BYTES", str(50 * 1024 * 1024)))

    # Document index
    INDEX_BACKEND: str = os.getenv("INDEX_BACKEND", "autorag")
    CLOUDFLARE_API_BASE: str = os.getenv(
        "CLOUDFLARE_API_BASE", "https://api.cloudflare.com/client/v4"
    )
    CLOUDFLARE_ACCOUNT_ID: str | None = os.getenv("CLOUDFLARE_ACCOUNT_ID")
    CLOUDFLARE_API_TOKEN: str | None = os.getenv("CLOUDFLARE_API_TOKEN")
    CLOUDFLARE_AUTORAG_INDEX: str | None = os.getenv("CLOUDFLARE_AUTORAG_INDEX")
    QDRANT_URL: str = os.getenv("QDRANT_URL", "http://localhost:6333")
    QDRANT_COLLECTION: str = os.getenv("QDRANT_COLLECTION", "product_chunks")
    CHUNK_MAX_TOKENS: int = int(os.getenv("CHUNK_MAX_TOKENS", "500"))
    CHUNK_OVERLAP_TOKENS: int = int(os.getenv("CHUNK_OVERLAP_TOKENS", "50"))

    # Embeddings (Qdrant index backend)
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
    OPENAI_EMBEDDING_MODEL: str | None = os.getenv("OPENAI_EMBEDDING_MODEL")

    # Transactional email
    RESEND_API_KEY: str | None = os.getenv("RESEND_API_KEY")
    EMAIL_FROM: str = os.getenv("EMAIL_FROM", "no-reply@example.com")

    # Auth
    SESSION_TTL_SECONDS: int = int(os.getenv("SESSION_TTL_SECONDS", str(7 * 86400)))
    VERIFICATION_TOKEN_TTL_HOURS: int = int(
        os.getenv("VERIFICATION_TOKEN_TTL_HOURS", "24")
    )
    RESET_TOKEN_TTL_SECONDS: int = int(os.getenv("RESET_TOKEN_TTL_SECONDS", "3600"))
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
    MIN_PASSWORD_LENGTH: int = 8

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.
        """
        return self.ENVIRONMENT.lower() == "production"

    @property
    def embeddings_enabled(self) -> bool:
        """Return True when chunk embeddings can be computed for Qdrant."""
        return bool(self.OPENAI_API_KEY and self.OPENAI_EMBEDDING_MODEL)

    @property
    def autorag_configured(self) -> bool:
        """Indicates whether the AutoRAG document index can be reached."""
        return bool(
            self.CLOUDFLARE_ACCOUNT_ID
            and self.CLOUDFLARE_API_TOKEN
            and self.CLOUDFLARE_AUTORAG_INDEX
        )

    @property
    def blob_storage_configured(self) -> bool:
        """Return True when any Azure credential source is present."""
        return bool(
            self.AZURE_SAS_URL
            or self.AZURE_STORAGE_CONNECTION_STRING
            or (self.AZURE_STORAGE_ACCOUNT_NAME and self.AZURE_STORAGE_ACCOUNT_KEY)
        )

    @property
    def email_enabled(self) -> bool:
        return bool(self.RESEND_API_KEY)

    def __init__(self):
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        # DEBUG only changes the default; an explicit LOG_LEVEL wins.
        self.log_level = os.getenv("LOG_LEVEL", "DEBUG" if self.debug else "INFO")
        logging.basicConfig(level=self.log_level)
        logging.getLogger(__name__).debug(
            "Config initialized with environment=%s, log_level=%s",
            self.ENVIRONMENT,
            self.log_level,
        )


# Create a global settings instance for import
settings = Settings()
