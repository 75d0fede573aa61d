from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TEXTCLEANER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # === Storage ===
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".textcleaner")
    history_limit: int = 10

    # === Rules ===
    strip_result: bool = True  # trim the rewritten text before storing it

    # === Diff ===
    max_diff_chars: int = 4000  # per side; the LCS table is O(n*m)
    cleanup_passes: int = 3

    @property
    def history_path(self) -> Path:
        return self.data_dir / "history.json"

    @property
    def translations_path(self) -> Path:
        return self.data_dir / "translations.json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
