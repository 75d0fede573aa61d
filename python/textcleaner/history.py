"""
Recently used rules, newest first, persisted as JSON.
"""

import json
from pathlib import Path
from typing import List, Optional, Union

import structlog
from pydantic import ValidationError

from textcleaner.config import Settings, get_settings
from textcleaner.models import HistoryEntry, RangeRule, ReplaceRule, RuleKind

logger = structlog.get_logger(__name__)


class RuleHistory:
    """
    A capped recency list. Pushing a rule that is already present moves it to
    the front instead of storing it twice.
    """

    def __init__(self, path: Optional[Path] = None, limit: Optional[int] = None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.path = Path(path) if path else settings.history_path
        self.limit = limit if limit is not None else settings.history_limit
        self._entries = self._load()

    def _load(self) -> List[HistoryEntry]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read().strip()
            if not content:
                return []
            return [HistoryEntry.model_validate(item) for item in json.loads(content)]
        except (json.JSONDecodeError, ValidationError, TypeError, OSError) as e:
            logger.warning(f"History file is unreadable, starting empty: {e}", path=str(self.path))
            return []

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump([entry.model_dump(mode="json") for entry in self._entries], f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save history: {e}") from e

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def push(self, kind: Union[RuleKind, str], data: Union[RangeRule, ReplaceRule]) -> HistoryEntry:
        kind = RuleKind(kind)
        entry = HistoryEntry(type=kind, data=data)

        self._entries = [e for e in self._entries if not e.same_rule(kind, data)]
        self._entries.insert(0, entry)
        del self._entries[self.limit :]

        self._save()
        return entry

    def remove(self, index: int) -> Optional[HistoryEntry]:
        if not 0 <= index < len(self._entries):
            logger.warning(f"No history entry at index {index}")
            return None

        entry = self._entries.pop(index)
        self._save()
        return entry

    def clear(self):
        self._entries = []
        self._save()
