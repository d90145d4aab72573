"""
Configuration Management for the Address Book account core

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: The location of the account file and of every per-user
data file is configuration, not a constant. Tests point `data_dir` at a
temporary directory; deployments set ADDRESSBOOK_DATA_DIR.
"""

from functools import cached_property, lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AccountSettings(BaseSettings):
    """
    Account store and per-user data layout.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADDRESSBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the account file and per-user data"
    )
    accounts_file_name: str = Field(
        default="accounts.txt",
        min_length=1,
        description="File name of the account directory inside data_dir"
    )
    record_delimiter: str = Field(
        default="\x1f",
        min_length=1,
        max_length=1,
        description="Single non-printable character separating record fields"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of the account file"
    )
    sample_data_on_first_login: bool = Field(
        default=True,
        description="Seed a sample address book when a user has none yet"
    )

    @field_validator('record_delimiter')
    @classmethod
    def validate_record_delimiter(cls, v: str) -> str:
        """The delimiter must not be able to appear inside a field."""
        if v.isprintable() or v in "\r\n":
            raise ValueError(
                "record_delimiter must be a non-printable character other than a line break"
            )
        return v

    @property
    def accounts_file_path(self) -> Path:
        """Path of the account directory file."""
        return self.data_dir / self.accounts_file_name

    def address_book_path(self, user_id: str) -> Path:
        """Path of a user's address book file."""
        return self.data_dir / f"{user_id}.addressbook.json"

    def prefs_path(self, user_id: str) -> Path:
        """Path of a user's preferences file."""
        return self.data_dir / f"{user_id}.prefs.json"


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @cached_property
    def accounts(self) -> AccountSettings:
        """Loaded once per Settings instance, so get_settings() caches it too."""
        return AccountSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
