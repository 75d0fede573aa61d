"""
Batch text rewriting: range deletions followed by literal replacements.
"""

import re
from typing import Iterable, Optional, Sequence

import structlog

from textcleaner.models import RangeRule, ReplaceRule

logger = structlog.get_logger(__name__)


def _range_pattern(rule: RangeRule) -> "re.Pattern[str]":
    """
    Shortest span from `start` to the nearest following `end`, across newlines.
    Both markers are escaped so user input is always matched literally.
    """
    return re.compile(f"{re.escape(rule.start)}.*?{re.escape(rule.end)}", re.DOTALL)


def delete_ranges(text: str, ranges: Iterable[RangeRule]) -> str:
    """Applies range rules in order, each against the output of the previous one."""
    for idx, rule in enumerate(ranges):
        if not rule.is_active:
            logger.debug(f"Skipping range rule {idx}: start and end must be non-empty and differ")
            continue

        text, count = _range_pattern(rule).subn("", text)
        logger.debug("Range rule applied", index=idx, start=rule.start, end=rule.end, removed=count)

    return text


def replace_literals(text: str, replacements: Iterable[ReplaceRule]) -> str:
    """Applies replacement rules in order, each against the output of the previous one."""
    for idx, rule in enumerate(replacements):
        if not rule.is_active:
            logger.debug(f"Skipping replacement rule {idx}: find is empty")
            continue

        count = text.count(rule.find)
        if count:
            # str.replace is literal, case-sensitive and non-overlapping, left to right.
            text = text.replace(rule.find, rule.replace)
        logger.debug("Replacement rule applied", index=idx, find=rule.find, replaced=count)

    return text


def apply_rules(
    text: str,
    ranges: Optional[Sequence[RangeRule]] = None,
    replacements: Optional[Sequence[ReplaceRule]] = None,
) -> str:
    """
    Rewrites `text` with every range rule first, then every replacement rule.

    Rules compose sequentially: each one sees the text produced by the rule
    before it, so list order is observable. Rules with empty fields and
    ranges with identical markers are skipped.
    The result is returned untrimmed; see `finalize`.
    """
    if not text:
        return ""

    text = delete_ranges(text, ranges or [])
    return replace_literals(text, replacements or [])


def finalize(text: str, strip: bool = True) -> str:
    """Post-step applied by callers once rules are done. Trims surrounding whitespace when `strip` is set."""
    return text.strip() if strip else text
