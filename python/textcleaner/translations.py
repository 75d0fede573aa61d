"""
Translation records keyed by the original message text.
"""

import datetime
import json
from pathlib import Path
from typing import Dict, Optional

import structlog
from pydantic import ValidationError

from textcleaner.config import Settings, get_settings
from textcleaner.models import TranslationRecord

logger = structlog.get_logger(__name__)


class TranslationStore:
    def __init__(self, path: Optional[Path] = None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.path = Path(path) if path else settings.translations_path
        self._records = self._load()

    def _load(self) -> Dict[str, TranslationRecord]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            records = [TranslationRecord.model_validate(item) for item in data]
        except (json.JSONDecodeError, ValidationError, TypeError, OSError) as e:
            logger.warning(f"Translation store is unreadable, starting empty: {e}", path=str(self.path))
            return {}

        return {record.original_text: record for record in records}

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(
                    [record.model_dump() for record in self._records.values()],
                    f,
                    ensure_ascii=False,
                    indent=2,
                )
        except OSError as e:
            raise RuntimeError(f"Failed to save translations: {e}") from e

    def get(self, original_text: str) -> Optional[str]:
        record = self._records.get(original_text)
        return record.translation if record else None

    def put(self, original_text: str, translation: str):
        self.save(original_text, translation)

    def save(self, original_text: str, translation: str) -> bool:
        """Inserts or updates the record. Returns True when an existing record was updated."""
        existed = original_text in self._records
        self._records[original_text] = TranslationRecord(
            original_text=original_text,
            translation=translation,
            updated_at=datetime.datetime.now(datetime.timezone.utc).isoformat(),
        )
        self._save()

        logger.info("Translation updated" if existed else "Translation added", chars=len(translation))
        return existed

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, original_text: str) -> bool:
        return original_text in self._records
