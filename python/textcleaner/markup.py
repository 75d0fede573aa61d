# FILE: python/textcleaner/markup.py
"""
Renders diff segments into marked-up text.

Escaping is its own step and runs before any markup is wrapped around the text,
so a raw `<` or `{++` in user text cannot break the output.
"""

from typing import List

from textcleaner.models import DiffSegment, MarkedDiff, SegmentType

_HTML_ESCAPES = [
    ("&", "&amp;"),  # must run first
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
]


def escape_html(text: str) -> str:
    for raw, entity in _HTML_ESCAPES:
        text = text.replace(raw, entity)
    return text


def _escape_critic(text: str) -> str:
    """Breaks up CriticMarkup delimiters that occur in the text itself."""
    for token in ("{++", "++}", "{--", "--}", "{==", "==}", "{>>", "<<}"):
        text = text.replace(token, token[0] + "\u200b" + token[1:])
    return text


class SegmentRenderer:
    """Turns an alignment into the old-side and new-side marked text."""

    def render(self, segments: List[DiffSegment]) -> MarkedDiff:
        old_parts = []
        new_parts = []
        for seg in segments:
            text = self.escape(seg.text)
            if seg.type is SegmentType.COMMON:
                old_parts.append(text)
                new_parts.append(text)
            elif seg.type is SegmentType.ADDED:
                old_parts.append(self.placeholder(text))
                new_parts.append(self.added(text))
            else:
                old_parts.append(self.removed(text))
                new_parts.append(self.placeholder(text))

        return MarkedDiff(
            old_marked=self.finish("".join(old_parts)),
            new_marked=self.finish("".join(new_parts)),
        )

    def escape(self, text: str) -> str:
        return text

    def added(self, text: str) -> str:
        raise NotImplementedError

    def removed(self, text: str) -> str:
        raise NotImplementedError

    def placeholder(self, text: str) -> str:
        return ""

    def finish(self, marked: str) -> str:
        return marked


class HtmlRenderer(SegmentRenderer):
    """
    Side-by-side HTML. A change shows on its own side with an `added`/`removed`
    class and as an invisible `phantom` copy on the other side, so both columns
    keep the same width. Newlines become <br>.
    """

    css_prefix = "tc-diff"

    def escape(self, text: str) -> str:
        return escape_html(text)

    def _span(self, kind: str, text: str) -> str:
        return f'<span class="{self.css_prefix}-{kind}">{text}</span>'

    def added(self, text: str) -> str:
        return self._span("added", text)

    def removed(self, text: str) -> str:
        return self._span("removed", text)

    def placeholder(self, text: str) -> str:
        return self._span("phantom", text)

    def finish(self, marked: str) -> str:
        return marked.replace("\n", "<br>")


class CriticMarkupRenderer(SegmentRenderer):
    """
    Plain-text sides using CriticMarkup:
    - Deletions: {--deleted text--}
    - Insertions: {++inserted text++}
    The other side of a change gets no placeholder.
    """

    def escape(self, text: str) -> str:
        return _escape_critic(text)

    def added(self, text: str) -> str:
        return f"{{++{text}++}}"

    def removed(self, text: str) -> str:
        return f"{{--{text}--}}"


def render_inline_critic(segments: List[DiffSegment]) -> str:
    """
    Single-stream CriticMarkup, for terminals. A removal directly followed by an
    addition reads as a modification: {--old--}{++new++}.
    """
    parts = []
    for seg in segments:
        text = _escape_critic(seg.text)
        if seg.type is SegmentType.COMMON:
            parts.append(text)
        elif seg.type is SegmentType.ADDED:
            parts.append(f"{{++{text}++}}")
        else:
            parts.append(f"{{--{text}--}}")
    return "".join(parts)
