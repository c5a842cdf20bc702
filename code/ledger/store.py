"""
store.py

Local JSON persistence for the registry (users + property files).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Tuple

from .errors import RegistryError
from .models import PropertyFile, User


def load_registry(path) -> Tuple[List[User], List[PropertyFile]]:
    p = Path(path)
    if not p.exists():
        return [], []

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RegistryError(f"Cannot read registry {p}: {e}") from e

    if not isinstance(data, dict):
        raise RegistryError(f"Registry {p} must hold an object with 'users' and 'files'")

    try:
        users = [User.from_dict(u) for u in data.get("users", [])]
        files = [PropertyFile.from_dict(f) for f in data.get("files", [])]
    except (TypeError, AttributeError) as e:
        raise RegistryError(f"Malformed registry record in {p}: {e}") from e

    return users, files


def save_registry(path, users: List[User], files: List[PropertyFile]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "users": [u.to_dict() for u in users],
        "files": [f.to_dict() for f in files],
    }
    p.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return p
