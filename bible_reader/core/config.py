"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env")

    REMOTE_BIBLE_ENGINE_URL: str = Field(...)
    BIBLE_READER_LOG_LEVEL: str = Field(default="info")
    BIBLE_READER_LOG_DIR: Path | None = Field(default=None)

    # Local database placement (documents-scoped SQLite directory)
    DOCUMENT_DIR: Path = Field(default=Path("/data"))
    SQLITE_DIRNAME: str = Field(default="SQLite")
    LOCAL_DATABASE_NAME: str = Field(default="bibles.db")

    # Bundled asset: either a packaged file or a download URL plus its hash
    BUNDLED_DATABASE_PATH: Path | None = Field(default=None)
    BUNDLED_DATABASE_URL: str | None = Field(default=None)
    BUNDLED_DATABASE_HASH: str | None = Field(default=None)

    DEFAULT_BOOK_VERSION_ID: int = Field(default=1)
    HEBREW_DICTIONARY: str = Field(default="@BdbMedDef")
    GREEK_DICTIONARY: str = Field(default="@MounceMedDef")

    ENGINE_REQUEST_TIMEOUT: float = Field(default=10.0)
    REACHABILITY_TIMEOUT: float = Field(default=2.0)

    V11N_OUTPUT_DATABASE: Path = Field(default=Path("output") / "bible.db")

    @property
    def sqlite_directory(self) -> Path:
        """Directory holding the downloaded local database."""
        return self.DOCUMENT_DIR / self.SQLITE_DIRNAME

    @property
    def local_database_path(self) -> Path:
        """Fixed path the bundled database is downloaded to."""
        return self.sqlite_directory / self.LOCAL_DATABASE_NAME


settings = Settings()  # type: ignore[call-arg]
config = settings


__all__ = ["Settings", "settings", "config"]
