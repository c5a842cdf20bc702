"""
importer.py

Builds users and property files from a SAP Business One registry export.

Input Contract
--------------
- UTF-8 text, optional BOM, one row per line, first row is the header.
- Header names are matched through csv_mapper.FIELD_ALIASES.
- At least the owner CNIC and item code columns must be present.

Failure Policy
--------------
- Fewer than two non-blank lines, undecodable bytes, or a header without
  the identity columns: LedgerImportError, nothing is returned.
- Individual rows without CNIC / item code are dropped and only counted.
- Bad numbers and dates inside accepted rows degrade to 0 / unparseable.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .aggregation import recompute
from .config import DEFAULT_EMAIL_DOMAIN, DEFAULT_PASSWORD
from .csv_mapper import HeaderIndex, MappedRow, map_row, split_csv_line
from .errors import LedgerImportError
from .merge import synthesize_user
from .models import PropertyFile, User


@dataclass
class ImportBatch:
    users: List[User] = field(default_factory=list)
    files: List[PropertyFile] = field(default_factory=list)
    rows_read: int = 0
    rows_dropped: int = 0

    @property
    def transaction_count(self) -> int:
        return sum(len(f.transactions) for f in self.files)


def _split_lines(text: str) -> List[str]:
    if text.startswith("\ufeff"):
        text = text[1:]
    return [line for line in re.split(r"\r?\n", text) if line.strip() != ""]


def _new_file(row: MappedRow, owner: User) -> PropertyFile:
    return PropertyFile(
        file_no=row.item_code,
        currency_no=row.currency_no,
        plot_size=row.plot_size,
        plot_value=row.plot_value,
        owner_name=owner.name,
        owner_cnic=row.cnic,
        father_name=row.father_name,
        cell_no=row.cell_no,
        reg_date=row.reg_date,
        address=row.address,
    )


def parse_registry_csv(
    text: str,
    as_of=None,
    email_domain: str = DEFAULT_EMAIL_DOMAIN,
    default_password: str = DEFAULT_PASSWORD,
) -> ImportBatch:
    lines = _split_lines(text)
    if len(lines) < 2:
        raise LedgerImportError("Format Invalid: expected a header and at least one data row")

    index = HeaderIndex(split_csv_line(lines[0]))
    missing = [f for f in ("owner_cnic", "item_code") if not index.has(f)]
    if missing:
        raise LedgerImportError(
            f"Header is missing identity column(s) {missing}: {index.headers}"
        )

    users: Dict[str, User] = {}
    files: Dict[str, PropertyFile] = {}
    batch = ImportBatch()

    for i, line in enumerate(lines[1:]):
        batch.rows_read += 1
        row = map_row(split_csv_line(line), index, seq=i + 1)
        if row is None:
            batch.rows_dropped += 1
            continue

        owner = users.get(row.cnic_key)
        if owner is None:
            owner = synthesize_user(
                row.cnic,
                name=row.owner_name,
                phone=row.owner_phone,
                email_domain=email_domain,
                default_password=default_password,
            )
            users[row.cnic_key] = owner

        pf = files.get(row.item_code)
        if pf is None:
            pf = _new_file(row, owner)
            files[row.item_code] = pf

        txn = row.transaction
        txn.doc_total = pf.plot_value
        pf.transactions.append(txn)

    batch.users = list(users.values())
    batch.files = [recompute(pf, as_of) for pf in files.values()]
    return batch


def read_registry_csv(path, **kwargs) -> ImportBatch:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Registry export not found: {p}")
    try:
        text = p.read_bytes().decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise LedgerImportError(f"Registry export is not valid UTF-8: {e}") from e
    return parse_registry_csv(text, **kwargs)
