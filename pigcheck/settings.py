"""
Configuration settings for the package validator.

Environment variables (a .env file in the working directory is honoured):
    PIG_MESSAGE_LANGUAGE      Language of status messages (en, de, fr, es)
    PIG_MAX_DOCUMENT_BYTES    Largest package document the importer accepts
    PIG_LOG_LEVEL             Log level for the CLI and the server
    PIG_HOST                  Bind address of the validation server
    PIG_PORT                  Port of the validation server
"""

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Validator settings."""

    model_config = SettingsConfigDict(env_prefix="PIG_", extra="ignore")

    message_language: str = "en"
    max_document_bytes: int = 20 * 1024 * 1024
    log_level: str = "INFO"

    host: str = "127.0.0.1"
    port: int = 8000


settings = Settings()
