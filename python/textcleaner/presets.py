"""
Helpers for prompt preset JSON files: list the prompt names, or rename prompts
from a newline-separated list.
"""

import copy
import json
import re
from typing import Any, List, Optional, Union

PresetData = Union[dict, list]


class PresetError(ValueError):
    pass


def load_preset(text: str) -> PresetData:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise PresetError(f"Invalid preset JSON: {e}") from e


def dump_preset(data: PresetData) -> str:
    return json.dumps(data, ensure_ascii=False, indent=4)


def prompt_list(data: Any) -> Optional[List[dict]]:
    """A preset is either a bare list of prompts or an object with a `prompts` list."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("prompts"), list):
        return data["prompts"]
    return None


def export_prompt_names(data: Any) -> str:
    prompts = prompt_list(data) or []
    return "\n".join((p.get("name") if isinstance(p, dict) else None) or "Unknown" for p in prompts)


def import_prompt_names(data: PresetData, names_text: str) -> PresetData:
    """
    Renames prompts by position from `names_text`, one name per line.
    Extra lines are ignored; prompts without a matching line keep their name.
    """
    updated = copy.deepcopy(data)
    prompts = prompt_list(updated)
    if prompts is None:
        raise PresetError("Preset does not contain a prompt list")

    names = re.split(r"\r?\n", names_text)
    for prompt, name in zip(prompts, names):
        if isinstance(prompt, dict):
            prompt["name"] = name
    return updated
