"""
Tests for the JSON-backed stores: rule history and translations.

Run: python3 test_storage.py
From: python/
"""

import json
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, '.')

from textcleaner.config import Settings
from textcleaner.history import RuleHistory
from textcleaner.models import RangeRule, ReplaceRule, RuleKind
from textcleaner.translations import TranslationStore


def test_history_push_dedups_and_moves_to_front():
    with tempfile.TemporaryDirectory() as tmp:
        history = RuleHistory(path=Path(tmp) / "history.json", limit=10)
        history.push(RuleKind.RANGE, RangeRule(start="<", end=">"))
        history.push("replace", ReplaceRule(find="a", replace="b"))
        history.push(RuleKind.RANGE, RangeRule(start="<", end=">"))

        entries = history.entries()
        assert len(entries) == 2
        assert entries[0].type == RuleKind.RANGE
        assert entries[1].data == ReplaceRule(find="a", replace="b")

        # Same find with a different replacement is a different rule.
        history.push(RuleKind.REPLACE, ReplaceRule(find="a", replace="c"))
        assert len(history.entries()) == 3
    print("PASS: history push dedups and moves to front")


def test_history_is_capped():
    with tempfile.TemporaryDirectory() as tmp:
        history = RuleHistory(path=Path(tmp) / "history.json", limit=3)
        for idx in range(5):
            history.push(RuleKind.REPLACE, ReplaceRule(find=f"w{idx}", replace=""))

        assert [e.data.find for e in history.entries()] == ["w4", "w3", "w2"]
    print("PASS: history is capped")


def test_history_persists_and_reloads():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "nested" / "history.json"
        history = RuleHistory(path=path, limit=10)
        history.push(RuleKind.RANGE, RangeRule(start="(", end=")"))
        history.push(RuleKind.REPLACE, ReplaceRule(find="x", replace="y"))

        reloaded = RuleHistory(path=path, limit=10)
        entries = reloaded.entries()
        assert [e.type for e in entries] == [RuleKind.REPLACE, RuleKind.RANGE]
        assert isinstance(entries[0].data, ReplaceRule)
        assert isinstance(entries[1].data, RangeRule)
        assert entries[1].data.start == "("

        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        assert raw[0] == {"type": "replace", "data": {"find": "x", "replace": "y"}}
    print("PASS: history persists and reloads")


def test_history_remove_and_clear():
    with tempfile.TemporaryDirectory() as tmp:
        history = RuleHistory(path=Path(tmp) / "history.json", limit=10)
        history.push(RuleKind.REPLACE, ReplaceRule(find="a", replace=""))
        history.push(RuleKind.REPLACE, ReplaceRule(find="b", replace=""))

        assert history.remove(5) is None
        removed = history.remove(0)
        assert removed.data.find == "b"
        assert [e.data.find for e in history.entries()] == ["a"]

        history.clear()
        assert history.entries() == []
        assert RuleHistory(path=Path(tmp) / "history.json", limit=10).entries() == []
    print("PASS: history remove and clear")


def test_history_corrupt_file_loads_empty():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "history.json"
        path.write_text("{not json", encoding="utf-8")
        assert RuleHistory(path=path, limit=10).entries() == []
    print("PASS: history corrupt file loads empty")


def test_history_uses_settings_defaults():
    with tempfile.TemporaryDirectory() as tmp:
        settings = Settings(data_dir=Path(tmp), history_limit=2)
        history = RuleHistory(settings=settings)
        assert history.path == Path(tmp) / "history.json"
        assert history.limit == 2
    print("PASS: history uses settings defaults")


def test_translation_insert_then_update():
    with tempfile.TemporaryDirectory() as tmp:
        store = TranslationStore(path=Path(tmp) / "translations.json")
        assert store.get("Hello") is None

        assert store.save("Hello", "안녕하세요") is False
        assert store.get("Hello") == "안녕하세요"
        assert "Hello" in store

        assert store.save("Hello", "안녕") is True
        assert store.get("Hello") == "안녕"
        assert len(store) == 1
    print("PASS: translation insert then update")


def test_translation_persists():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "translations.json"
        TranslationStore(path=path).put("original\ntext", "translated")

        reloaded = TranslationStore(path=path)
        assert reloaded.get("original\ntext") == "translated"
        assert reloaded.get("original text") is None
    print("PASS: translation persists")


def test_translation_corrupt_file_loads_empty():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "translations.json"
        path.write_text('[{"original_text": 1}]', encoding="utf-8")
        assert len(TranslationStore(path=path)) == 0
    print("PASS: translation corrupt file loads empty")


if __name__ == "__main__":
    tests = [
        test_history_push_dedups_and_moves_to_front,
        test_history_is_capped,
        test_history_persists_and_reloads,
        test_history_remove_and_clear,
        test_history_corrupt_file_loads_empty,
        test_history_uses_settings_defaults,
        test_translation_insert_then_update,
        test_translation_persists,
        test_translation_corrupt_file_loads_empty,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {test.__name__}: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print(f"\n{'='*60}")
    print(f"Results: {passed} passed, {failed} failed out of {len(tests)} tests")
    if failed == 0:
        print("ALL TESTS PASSED")
    else:
        print("SOME TESTS FAILED")
