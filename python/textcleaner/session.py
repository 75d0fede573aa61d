"""
Per-message editing state. Each message being edited gets its own session, so
concurrent edits of different messages never share text or compare mode.
"""

from typing import List, Optional, Sequence

import structlog

from textcleaner.config import Settings, get_settings
from textcleaner.diff import align
from textcleaner.history import RuleHistory
from textcleaner.markup import HtmlRenderer, SegmentRenderer
from textcleaner.models import DiffSegment, MarkedDiff, RangeRule, ReplaceRule, RuleKind
from textcleaner.rules import apply_rules, finalize

logger = structlog.get_logger(__name__)


class InputTooLargeError(ValueError):
    pass


class EditSession:
    def __init__(
        self,
        message_id: Optional[str],
        original: str,
        settings: Optional[Settings] = None,
        renderer: Optional[SegmentRenderer] = None,
    ):
        self.message_id = message_id
        self.original = original
        self.settings = settings or get_settings()
        self.renderer = renderer or HtmlRenderer()

        self.current = original
        self.compare_mode = False
        self.last_compare: Optional[MarkedDiff] = None

    def process(
        self,
        ranges: Optional[Sequence[RangeRule]] = None,
        replacements: Optional[Sequence[ReplaceRule]] = None,
    ) -> str:
        """
        Applies the rules to the current text, not the original, so repeated
        runs accumulate. The result becomes the new current text; in compare mode
        the comparison is refreshed against it (`last_compare`).
        """
        result = finalize(apply_rules(self.current, ranges, replacements), strip=self.settings.strip_result)
        logger.info(
            "Processed message",
            message_id=self.message_id,
            before=len(self.current),
            after=len(result),
        )
        self.current = result
        if self.compare_mode:
            self.last_compare = self.compare()
        return result

    def edit(self, text: str):
        """Manual edit of the result text."""
        self.current = text

    def reset(self):
        self.current = self.original
        self.compare_mode = False
        self.last_compare = None

    @property
    def changed(self) -> bool:
        return self.current != self.original

    def _check_size(self, text: str, side: str):
        limit = self.settings.max_diff_chars
        if len(text) > limit:
            raise InputTooLargeError(f"{side} text has {len(text)} characters; comparison is limited to {limit}")

    def segments(self) -> List[DiffSegment]:
        """Alignment of the original against the current text. Raises InputTooLargeError past the size cap."""
        self._check_size(self.original, "Original")
        self._check_size(self.current, "Modified")
        return align(self.original, self.current, passes=self.settings.cleanup_passes)

    def compare(self) -> MarkedDiff:
        return self.renderer.render(self.segments())

    def toggle_compare(self) -> Optional[MarkedDiff]:
        """Flips compare mode. Returns the comparison when entering it."""
        self.compare_mode = not self.compare_mode
        self.last_compare = self.compare() if self.compare_mode else None
        return self.last_compare

    def remember(
        self,
        history: RuleHistory,
        ranges: Optional[Sequence[RangeRule]] = None,
        replacements: Optional[Sequence[ReplaceRule]] = None,
    ):
        """Records every usable rule in the history: ranges first, then replacements."""
        for rule in ranges or []:
            if rule.is_active:
                history.push(RuleKind.RANGE, rule)
        for rule in replacements or []:
            if rule.is_active:
                history.push(RuleKind.REPLACE, rule)
