"""
Character-level comparison of two texts.

`align` computes a longest-common-subsequence alignment and tidies it with a
bounded semantic cleanup; `compute` hands the segments to a renderer.
"""

from typing import List, Optional, Tuple

import structlog

from textcleaner.markup import HtmlRenderer, SegmentRenderer
from textcleaner.models import DiffSegment, MarkedDiff, SegmentType

logger = structlog.get_logger(__name__)

# Common runs shorter than this are folded into a neighbouring change.
SHORT_COMMON_LIMIT = 4

# Fixed number of cleanup passes. Not a fixpoint: inputs with many short common
# fragments may still hold some after the last pass.
CLEANUP_PASSES = 3

_Run = Tuple[SegmentType, str]

_OPPOSITE = {
    SegmentType.ADDED: SegmentType.REMOVED,
    SegmentType.REMOVED: SegmentType.ADDED,
}


def _lcs_table(old: str, new: str) -> List[List[int]]:
    """dp[i][j] is the LCS length of old[:i] and new[:j]."""
    n, m = len(old), len(new)
    dp = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(1, n + 1):
        row, prev = dp[i], dp[i - 1]
        old_char = old[i - 1]
        for j in range(1, m + 1):
            if old_char == new[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(prev[j], row[j - 1])
    return dp


def _backtrace(old: str, new: str, dp: List[List[int]]) -> List[_Run]:
    """
    Walks the table from (n, m) back to the origin, one character per step.
    On equal scores an addition is preferred over a removal; changing that
    picks a different (equally long) alignment.
    """
    i, j = len(old), len(new)
    atoms: List[_Run] = []
    while i > 0 or j > 0:
        if i > 0 and j > 0 and old[i - 1] == new[j - 1]:
            atoms.append((SegmentType.COMMON, old[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            atoms.append((SegmentType.ADDED, new[j - 1]))
            j -= 1
        else:
            atoms.append((SegmentType.REMOVED, old[i - 1]))
            i -= 1
    atoms.reverse()
    return atoms


def _push(runs: List[_Run], kind: SegmentType, text: str):
    if runs and runs[-1][0] is kind:
        runs[-1] = (kind, runs[-1][1] + text)
    else:
        runs.append((kind, text))


def _coalesce(atoms: List[_Run]) -> List[_Run]:
    runs: List[_Run] = []
    for kind, text in atoms:
        _push(runs, kind, text)
    return runs


def _absorb_short_commons(runs: List[_Run], limit: int = SHORT_COMMON_LIMIT) -> List[_Run]:
    """
    One cleanup pass. A common run shorter than `limit` that touches a change
    is folded into it: appended to the preceding change when there is one,
    otherwise prepended to the following change.

    The folded text becomes part of the rewrite on both sides, so a mirror copy
    (added for a removal, removed for an addition) is emitted right after the
    change that took it. Both texts stay reconstructible from the cleaned runs.
    """
    cleaned: List[_Run] = []
    carry = ""

    for idx, (kind, text) in enumerate(runs):
        carried, carry = carry, ""

        if kind is SegmentType.COMMON and len(text) < limit:
            if cleaned and cleaned[-1][0] is not SegmentType.COMMON:
                changed = cleaned[-1][0]
                cleaned[-1] = (changed, cleaned[-1][1] + text)
                _push(cleaned, _OPPOSITE[changed], text)
                continue

            following = runs[idx + 1] if idx + 1 < len(runs) else None
            if following is not None and following[0] is not SegmentType.COMMON:
                carry = text
                continue

        _push(cleaned, kind, carried + text)
        if carried:
            _push(cleaned, _OPPOSITE[kind], carried)

    return cleaned


def align(old_text: str, new_text: str, passes: int = CLEANUP_PASSES) -> List[DiffSegment]:
    """
    Aligns two texts character by character (code points).

    Common+removed segments concatenate to `old_text`; common+added segments
    concatenate to `new_text`. Time and memory are O(len(old) * len(new)), so
    callers should cap input size.
    """
    dp = _lcs_table(old_text, new_text)
    runs = _coalesce(_backtrace(old_text, new_text, dp))

    for _ in range(passes):
        runs = _absorb_short_commons(runs)

    logger.debug(
        "Aligned texts",
        old_len=len(old_text),
        new_len=len(new_text),
        common=dp[len(old_text)][len(new_text)],
        segments=len(runs),
    )
    return [DiffSegment(type=kind, text=text) for kind, text in runs]


def compute(old_text: str, new_text: str, renderer: Optional[SegmentRenderer] = None) -> MarkedDiff:
    """Aligns the texts and renders both sides. Defaults to HTML output."""
    renderer = renderer or HtmlRenderer()
    return renderer.render(align(old_text, new_text))


diff = compute


def has_changes(segments: List[DiffSegment]) -> bool:
    return any(seg.type is not SegmentType.COMMON for seg in segments)
