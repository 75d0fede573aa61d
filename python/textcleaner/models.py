from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class RangeRule(BaseModel):
    """
    A start/end marker pair. Every span from `start` to the nearest following
    `end` is deleted, markers included.
    """

    start: str = Field("", description="Literal text that opens the span to delete.")
    end: str = Field("", description="Literal text that closes the span to delete.")

    @property
    def is_active(self) -> bool:
        # Identical markers never delimit a span.
        return bool(self.start) and bool(self.end) and self.start != self.end

    def label(self) -> str:
        return f"✂️ {self.start}~{self.end}"


class ReplaceRule(BaseModel):
    """
    A literal find/replace pair. An empty `replace` deletes every occurrence of `find`.
    """

    find: str = Field("", description="Literal, case-sensitive text to look for.")
    replace: str = Field("", description="Text inserted in place of each match.")

    @field_validator("replace", mode="before")
    @classmethod
    def _none_means_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_active(self) -> bool:
        return bool(self.find)

    def label(self) -> str:
        return f"🔄 {self.find}→{self.replace}"


class RuleSet(BaseModel):
    """Ordered range and replacement rules, as stored in a rules file."""

    ranges: List[RangeRule] = Field(default_factory=list)
    replacements: List[ReplaceRule] = Field(default_factory=list)

    @classmethod
    def from_items(cls, items: List[Dict[str, Any]]) -> "RuleSet":
        """
        Builds a RuleSet from a flat list of rule dicts, keeping list order.
        Items carrying `start`/`end` are ranges, items carrying `find` are replacements.
        """
        ranges = []
        replacements = []
        for item in items:
            if "find" in item:
                replacements.append(ReplaceRule.model_validate(item))
            elif "start" in item or "end" in item:
                ranges.append(RangeRule.model_validate(item))
        return cls(ranges=ranges, replacements=replacements)


class SegmentType(str, Enum):
    COMMON = "common"
    ADDED = "added"
    REMOVED = "removed"


class DiffSegment(BaseModel):
    """A maximal run of characters sharing one classification."""

    type: SegmentType
    text: str


class MarkedDiff(BaseModel):
    """The two rendered sides of a comparison, meant to be shown side by side."""

    old_marked: str
    new_marked: str


class RuleKind(str, Enum):
    RANGE = "range"
    REPLACE = "replace"


class HistoryEntry(BaseModel):
    type: RuleKind
    data: Union[RangeRule, ReplaceRule]

    @model_validator(mode="before")
    @classmethod
    def _rule_from_type(cls, values: Any) -> Any:
        # Both rule models accept an empty dict, so the union cannot pick on its own.
        if isinstance(values, dict) and isinstance(values.get("data"), dict):
            rule_cls = RangeRule if values.get("type") == RuleKind.RANGE else ReplaceRule
            values = {**values, "data": rule_cls.model_validate(values["data"])}
        return values

    def same_rule(self, kind: RuleKind, data: Union[RangeRule, ReplaceRule]) -> bool:
        return self.type == kind and self.data.model_dump() == data.model_dump()

    def label(self) -> str:
        return self.data.label()


class TranslationRecord(BaseModel):
    original_text: str
    translation: str
    updated_at: Optional[str] = None
