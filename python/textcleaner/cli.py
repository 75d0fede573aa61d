import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import ValidationError

from textcleaner import __version__
from textcleaner.config import get_settings
from textcleaner.history import RuleHistory
from textcleaner.markup import CriticMarkupRenderer, HtmlRenderer, render_inline_critic
from textcleaner.models import RangeRule, ReplaceRule, RuleSet
from textcleaner.presets import PresetError, dump_preset, export_prompt_names, import_prompt_names, load_preset
from textcleaner.session import EditSession, InputTooLargeError
from textcleaner.translations import TranslationStore


def _read_text(path: Path) -> str:
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _write_or_print(text: str, output: Optional[Path], label: str):
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"✅ Saved {label} to {output}", file=sys.stderr)
    else:
        print(text)


def _load_rules_from_json(path: Path) -> RuleSet:
    """
    Accepts either {"ranges": [...], "replacements": [...]} or a flat list of
    rule objects ({"start", "end"} or {"find", "replace"}).
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, list):
            return RuleSet.from_items(data)
        return RuleSet.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Error parsing JSON rules: {e}", file=sys.stderr)
        sys.exit(1)


def _collect_rules(args) -> RuleSet:
    rules = _load_rules_from_json(args.rules) if args.rules else RuleSet()
    ranges: List[RangeRule] = list(rules.ranges)
    replacements: List[ReplaceRule] = list(rules.replacements)

    for start, end in args.range or []:
        ranges.append(RangeRule(start=start, end=end))
    for find, replace in args.replace or []:
        replacements.append(ReplaceRule(find=find, replace=replace))

    return RuleSet(ranges=ranges, replacements=replacements)


def handle_clean(args):
    text = _read_text(args.input)
    rules = _collect_rules(args)

    if not rules.ranges and not rules.replacements:
        print("Warning: No rules given; text is unchanged.", file=sys.stderr)

    settings = get_settings().model_copy(update={"strip_result": not args.no_strip})
    session = EditSession(message_id=str(args.input), original=text, settings=settings)
    result = session.process(rules.ranges, rules.replacements)

    if args.remember:
        session.remember(RuleHistory(settings=settings), rules.ranges, rules.replacements)

    _write_or_print(result, args.output, "cleaned text")
    print(
        f"Stats: {len(rules.ranges)} ranges, {len(rules.replacements)} replacements, "
        f"{len(text)} -> {len(result)} chars.",
        file=sys.stderr,
    )


def handle_diff(args):
    text_orig = _read_text(args.original)
    text_mod = _read_text(args.modified)

    session = EditSession(message_id=None, original=text_orig)
    session.edit(text_mod)
    try:
        segments = session.segments()
    except InputTooLargeError as e:
        print(f"Error: {e} (set TEXTCLEANER_MAX_DIFF_CHARS to raise it)", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps([seg.model_dump(mode="json") for seg in segments], ensure_ascii=False, indent=2))
        return

    if args.format == "inline":
        _write_or_print(render_inline_critic(segments), args.output, "inline diff")
        return

    renderer = HtmlRenderer() if args.format == "html" else CriticMarkupRenderer()
    marked = renderer.render(segments)
    separator = "<hr>" if args.format == "html" else "\n" + "=" * 60 + "\n"
    _write_or_print(f"{marked.old_marked}{separator}{marked.new_marked}", args.output, "diff")


def handle_history(args):
    history = RuleHistory()

    if args.action == "remove":
        if args.index is None:
            print("Error: history remove requires an index", file=sys.stderr)
            sys.exit(1)
        entry = history.remove(args.index)
        if entry is None:
            print(f"Error: No history entry at index {args.index}", file=sys.stderr)
            sys.exit(1)
        print(f"Removed: {entry.label()}", file=sys.stderr)
        return

    if args.action == "clear":
        history.clear()
        print("History cleared.", file=sys.stderr)
        return

    entries = history.entries()
    if not entries:
        print("History is empty.", file=sys.stderr)
    for idx, entry in enumerate(entries):
        print(f"[{idx}] {entry.label()}")


def handle_names(args):
    try:
        data = load_preset(_read_text(args.preset))
        if args.action == "export":
            _write_or_print(export_prompt_names(data), args.output, "prompt names")
            return

        if not args.names:
            print("Error: names import requires a names file", file=sys.stderr)
            sys.exit(1)
        updated = import_prompt_names(data, _read_text(args.names))
        _write_or_print(dump_preset(updated), args.output, "preset")
    except PresetError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def handle_translation(args):
    store = TranslationStore()
    original = _read_text(args.original)

    if args.action == "get":
        translation = store.get(original)
        if translation is None:
            print("No translation stored for this text.", file=sys.stderr)
            sys.exit(1)
        print(translation)
        return

    if not args.translation:
        print("Error: translation put requires a translation file", file=sys.stderr)
        sys.exit(1)
    translation = _read_text(args.translation)
    if not translation.strip():
        print("Error: Translation is empty; nothing to save.", file=sys.stderr)
        sys.exit(1)

    updated = store.save(original, translation)
    print("✅ Translation updated." if updated else "✅ Translation added.", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="textcleaner", description="TextCleaner: rule-based chat message cleanup")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Log rule and diff details to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Subcommands")

    p_clean = subparsers.add_parser("clean", help="Apply range and replacement rules to a text file")
    p_clean.add_argument("input", type=Path, help="Input text file")
    p_clean.add_argument("-r", "--rules", type=Path, help="JSON rules file")
    p_clean.add_argument(
        "--range",
        nargs=2,
        action="append",
        metavar=("START", "END"),
        help="Delete every START...END span (repeatable, applied in order)",
    )
    p_clean.add_argument(
        "--replace",
        nargs=2,
        action="append",
        metavar=("FIND", "REPLACE"),
        help="Replace every FIND with REPLACE (repeatable, applied in order)",
    )
    p_clean.add_argument("--no-strip", action="store_true", help="Keep leading/trailing whitespace of the result")
    p_clean.add_argument("--remember", action="store_true", help="Add the rules to the recent-rules history")
    p_clean.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p_clean.set_defaults(func=handle_clean)

    p_diff = subparsers.add_parser("diff", help="Compare two text files character by character")
    p_diff.add_argument("original", type=Path, help="Original text file")
    p_diff.add_argument("modified", type=Path, help="Modified text file")
    p_diff.add_argument(
        "-f",
        "--format",
        choices=["inline", "critic", "html"],
        default="inline",
        help="inline: one CriticMarkup stream; critic/html: old side, separator, new side",
    )
    p_diff.add_argument("--json", action="store_true", help="Output raw JSON segments")
    p_diff.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p_diff.set_defaults(func=handle_diff)

    p_history = subparsers.add_parser("history", help="Show or edit the recent-rules history")
    p_history.add_argument("action", choices=["list", "remove", "clear"], nargs="?", default="list")
    p_history.add_argument("index", type=int, nargs="?", help="Entry index for 'remove'")
    p_history.set_defaults(func=handle_history)

    p_names = subparsers.add_parser("names", help="Export or import prompt names of a preset JSON")
    p_names.add_argument("action", choices=["export", "import"])
    p_names.add_argument("preset", type=Path, help="Preset JSON file")
    p_names.add_argument("names", type=Path, nargs="?", help="Names file for 'import', one name per line")
    p_names.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p_names.set_defaults(func=handle_names)

    p_translation = subparsers.add_parser("translation", help="Read or store a translation for a message")
    p_translation.add_argument("action", choices=["get", "put"])
    p_translation.add_argument("original", type=Path, help="File holding the original message text")
    p_translation.add_argument("translation", type=Path, nargs="?", help="File holding the translation for 'put'")
    p_translation.set_defaults(func=handle_translation)

    return parser


def _configure_logging(verbose: bool):
    # stdout carries command output, so logs go to stderr.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
