import json
import logging
import sys
from typing import List, Optional

import structlog
from mcp.server.fastmcp import FastMCP

from textcleaner.config import get_settings
from textcleaner.diff import has_changes
from textcleaner.history import RuleHistory
from textcleaner.markup import CriticMarkupRenderer, HtmlRenderer, render_inline_critic
from textcleaner.models import RangeRule, ReplaceRule
from textcleaner.session import EditSession
from textcleaner.translations import TranslationStore

# --- LOGGING CONFIGURATION ---
# MCP communicates over stdio.
# CRITICAL: All logs must go to stderr. Any print to stdout will break the JSON-RPC protocol.
logging.basicConfig(stream=sys.stderr, level=logging.INFO, force=True)

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

mcp = FastMCP("TextCleaner Service")


@mcp.tool()
def clean_text(
    text: str,
    ranges: Optional[List[RangeRule]] = None,
    replacements: Optional[List[ReplaceRule]] = None,
    strip: bool = True,
    remember: bool = False,
) -> str:
    """
    Rewrites a chat message with deletion ranges and literal replacements.

    Args:
        text: The message text.
        ranges: Start/end marker pairs. Every span from `start` to the nearest following
                `end` is deleted, markers included. Applied first, in list order.
        replacements: Find/replace pairs, matched literally and case-sensitively.
                      Applied after all ranges, in list order; each sees the previous result.
        strip: If True (default), trims leading/trailing whitespace of the result.
        remember: If True, adds the rules to the recent-rules history.
    """
    try:
        settings = get_settings().model_copy(update={"strip_result": strip})
        session = EditSession(message_id=None, original=text, settings=settings)
        result = session.process(ranges, replacements)
        if remember:
            session.remember(RuleHistory(settings=settings), ranges, replacements)
        return result
    except Exception as e:
        return f"Error cleaning text: {str(e)}"


@mcp.tool()
def diff_texts(original: str, modified: str, output_format: str = "inline") -> str:
    """
    Compares two texts character by character.

    Args:
        original: The text before editing.
        modified: The text after editing.
        output_format: 'inline' (default) returns a single CriticMarkup stream
                       ({--removed--}{++added++}). 'critic' and 'html' return a JSON object
                       with `old_marked` and `new_marked` sides for side-by-side display.
                       'segments' returns the raw alignment as a JSON list.
    """
    try:
        settings = get_settings()
        session = EditSession(message_id=None, original=original, settings=settings)
        session.edit(modified)

        if output_format == "html":
            session.renderer = HtmlRenderer()
            return session.compare().model_dump_json()
        if output_format == "critic":
            session.renderer = CriticMarkupRenderer()
            return session.compare().model_dump_json()

        segments = session.segments()
        if output_format == "segments":
            return json.dumps([seg.model_dump(mode="json") for seg in segments], ensure_ascii=False)
        if not has_changes(segments):
            return "No text differences found."
        return render_inline_critic(segments)
    except Exception as e:
        return f"Error computing diff: {str(e)}"


@mcp.tool()
def recent_rules() -> str:
    """Lists the recently used rules, newest first, as JSON."""
    try:
        entries = RuleHistory().entries()
        return json.dumps([entry.model_dump(mode="json") for entry in entries], ensure_ascii=False)
    except Exception as e:
        return f"Error reading history: {str(e)}"


@mcp.tool()
def get_translation(original_text: str) -> str:
    """Returns the stored translation for a message, keyed by its original text."""
    try:
        translation = TranslationStore().get(original_text)
        if translation is None:
            return "No translation stored for this text."
        return translation
    except Exception as e:
        return f"Error reading translation: {str(e)}"


@mcp.tool()
def save_translation(original_text: str, translation: str) -> str:
    """Stores (or replaces) the translation for a message."""
    try:
        if not translation.strip():
            return "Error: translation cannot be empty."
        updated = TranslationStore().save(original_text, translation)
        return "Translation updated." if updated else "Translation added."
    except Exception as e:
        return f"Error saving translation: {str(e)}"


def main():
    mcp.run()


if __name__ == "__main__":
    main()
