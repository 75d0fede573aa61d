"""
Tests for textcleaner.presets — prompt name export/import.

Run: python3 test_presets.py
From: python/
"""

import sys

sys.path.insert(0, '.')

from textcleaner.presets import (
    PresetError,
    dump_preset,
    export_prompt_names,
    import_prompt_names,
    load_preset,
    prompt_list,
)


def test_prompt_list_shapes():
    assert prompt_list([{"name": "a"}]) == [{"name": "a"}]
    assert prompt_list({"prompts": [{"name": "b"}]}) == [{"name": "b"}]
    assert prompt_list({"other": []}) is None
    assert prompt_list("text") is None
    print("PASS: prompt list shapes")


def test_export_prompt_names():
    data = {"prompts": [{"name": "Main"}, {"content": "no name"}, {"name": "Jailbreak"}]}
    assert export_prompt_names(data) == "Main\nUnknown\nJailbreak"
    assert export_prompt_names([{"name": "Solo"}]) == "Solo"
    assert export_prompt_names({"nothing": True}) == ""
    print("PASS: export prompt names")


def test_import_prompt_names_by_position():
    data = {"prompts": [{"name": "a"}, {"name": "b"}, {"name": "c"}], "temperature": 1}
    updated = import_prompt_names(data, "first\r\nsecond")

    assert [p["name"] for p in updated["prompts"]] == ["first", "second", "c"]
    assert updated["temperature"] == 1
    # The input is left untouched.
    assert [p["name"] for p in data["prompts"]] == ["a", "b", "c"]

    # Extra lines are ignored.
    updated = import_prompt_names([{"name": "x"}], "one\ntwo\nthree")
    assert updated == [{"name": "one"}]
    print("PASS: import prompt names by position")


def test_import_requires_prompt_list():
    try:
        import_prompt_names({"not_prompts": 1}, "a")
    except PresetError as e:
        assert "prompt list" in str(e)
    else:
        raise AssertionError("expected PresetError")
    print("PASS: import requires prompt list")


def test_load_and_dump_preset():
    data = load_preset('{"prompts": [{"name": "이름"}]}')
    assert data["prompts"][0]["name"] == "이름"
    assert load_preset(dump_preset(data)) == data
    assert "이름" in dump_preset(data)

    try:
        load_preset("{broken")
    except PresetError as e:
        assert isinstance(e, ValueError)
        assert "Invalid preset JSON" in str(e)
    else:
        raise AssertionError("expected PresetError")
    print("PASS: load and dump preset")


if __name__ == "__main__":
    tests = [
        test_prompt_list_shapes,
        test_export_prompt_names,
        test_import_prompt_names_by_position,
        test_import_requires_prompt_list,
        test_load_and_dump_preset,
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
