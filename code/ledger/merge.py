"""
merge.py

Folds an imported batch into the existing registry.

- REPLACE (WIPE): the import becomes the registry.
- UPSERT (MERGE): files keyed by file number, users by normalized CNIC.
  Existing records keep their position; imported ones overwrite in place or
  are appended in import order. Re-applying the same batch changes nothing.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple

from .config import DEFAULT_EMAIL_DOMAIN, DEFAULT_PASSWORD
from .models import PropertyFile, User, normalize_cnic


class MergeMode(Enum):
    REPLACE = "REPLACE"
    UPSERT = "UPSERT"

    @classmethod
    def parse(cls, text: str) -> "MergeMode":
        key = str(text).strip().upper()
        aliases = {"WIPE": cls.REPLACE, "MERGE": cls.UPSERT}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown import mode: {text!r} (expected MERGE or WIPE)") from None


def synthesize_user(
    raw_cnic: str,
    name: str = "",
    phone: str = "",
    email_domain: str = DEFAULT_EMAIL_DOMAIN,
    default_password: str = DEFAULT_PASSWORD,
) -> User:
    """Login-capable CLIENT entry for an owner seen only in the export."""
    key = normalize_cnic(raw_cnic)
    return User(
        id=f"user-{key}",
        cnic=raw_cnic,
        name=name or "SAP Member",
        email=f"{key}@{email_domain}",
        phone=phone or "-",
        role="CLIENT",
        status="Active",
        password=default_password,
    )


def merge_registry(
    existing_users: List[User],
    existing_files: List[PropertyFile],
    imported_users: List[User],
    imported_files: List[PropertyFile],
    mode: MergeMode = MergeMode.UPSERT,
) -> Tuple[List[User], List[PropertyFile]]:
    if mode is MergeMode.REPLACE:
        return list(imported_users), list(imported_files)

    user_map: Dict[str, User] = {u.cnic_key: u for u in existing_users}
    for u in imported_users:
        user_map[u.cnic_key] = u

    file_map: Dict[str, PropertyFile] = {f.file_no: f for f in existing_files}
    for f in imported_files:
        file_map[f.file_no] = f

    return list(user_map.values()), list(file_map.values())
