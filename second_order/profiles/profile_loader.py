"""
Load and save named dynamics profiles as JSON.

File format:
    {"version": "<second_order version>",
     "profiles": {"<name>": {"period": .., "damping": .., "response": ..}}}
"""
import json
import os
from typing import Dict

from second_order import VERSION
from second_order.profiles.dynamics_profile import DynamicsProfile


def load_profiles(json_path: str) -> Dict[str, DynamicsProfile]:
    """
    Read a profiles file. A version mismatch only prints a warning;
    malformed content raises ValueError.
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, dict) or "profiles" not in data:
        raise ValueError(f"{json_path}: expected an object with a 'profiles' key")

    file_version = data.get("version", "unknown")
    if file_version != VERSION:
        print(
            f"Warning: Profile file version ({file_version}) differs from current version ({VERSION}). "
            f"Proceeding with caution."
        )

    profiles = data["profiles"]
    if not isinstance(profiles, dict):
        raise ValueError(f"{json_path}: 'profiles' must be an object mapping names to profiles")

    result = {}
    for name, fields in profiles.items():
        if not isinstance(fields, dict):
            raise ValueError(f"{json_path}: profile '{name}' must be an object")
        try:
            result[name] = DynamicsProfile.from_dict(fields)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{json_path}: invalid profile '{name}': {e}") from e
    return result


def save_profiles(json_path: str, profiles: Dict[str, DynamicsProfile]) -> str:
    parent = os.path.dirname(json_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    data = {
        "version": VERSION,
        "profiles": {name: profile.to_dict() for name, profile in profiles.items()},
    }
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
    return json_path
