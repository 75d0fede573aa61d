from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from textcleaner.diff import align, compute, diff
from textcleaner.models import DiffSegment, MarkedDiff, RangeRule, ReplaceRule, RuleSet, SegmentType
from textcleaner.rules import apply_rules, finalize
from textcleaner.session import EditSession

try:
    __version__ = version("textcleaner")
except PackageNotFoundError:
    # Running from a source checkout without installing; fall back to the bundled VERSION file.
    _version_file = Path(__file__).parent / "VERSION"
    if _version_file.is_file():
        __version__ = _version_file.read_text().strip()
    else:
        __version__ = "0.0.0-dev"

__all__ = [
    "apply_rules",
    "finalize",
    "align",
    "compute",
    "diff",
    "EditSession",
    "RangeRule",
    "ReplaceRule",
    "RuleSet",
    "DiffSegment",
    "MarkedDiff",
    "SegmentType",
    "__version__",
]
