"""
csv_mapper.py

Maps rows of a SAP Business One registry export onto canonical records.

The export is not under our control:
- Column names drift between exports (u_ocnic / ocnic / cnic ...), so every
  canonical field has an ordered alias list and the first alias present wins.
- Header matching ignores case and punctuation.
- Cells may hold the literal NULL, thousands separators or parentheses.
- Rows without an owner CNIC or item code are not ledger rows and are dropped.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .models import Transaction, normalize_cnic


# ======================================================
# HEADER ALIASES (first match wins)
# ======================================================

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    # identity
    "owner_cnic": ("ocnic", "cnic", "u_ocnic"),
    "item_code": ("itemcode", "item_code", "u_itemcode"),
    "owner_name": ("oname", "ownername", "name"),
    "owner_phone": ("ocell", "cellno", "phone"),
    # file attributes
    "plot_value": ("doctotal",),
    "currency_no": ("currency", "currencyno"),
    "plot_size": ("dscription", "description", "size"),
    "father_name": ("ofatname", "fathername", "father_name"),
    "cell_no": ("ocell", "cellno", "cell_no"),
    "reg_date": ("otrfdate", "regdate"),
    "address": ("opraddress", "address", "owner_address"),
    # ledger line
    "trans_id": ("transid",),
    "line_id": ("line_id",),
    "short_name": ("shortname",),
    "due_date": ("duedate", "due_date"),
    "installment_no": ("u_intno",),
    "installment_name": ("u_intname", "type"),
    "trans_type": ("transtype",),
    "plot_type": ("plottype",),
    "description": ("dscription", "description"),
    "status": ("status",),
    "balance": ("balance",),
    "pay_src": ("paysrc",),
    "receivable": ("receivable",),
    "amount_paid": ("reconsum", "paid", "amount_paid"),
    "surcharge": ("markup", "surcharge"),
    "outstanding": ("balduedeb", "os_balance", "balance"),
    "receipt_date": ("refdate", "receipt_date", "ref_date"),
    "mode": ("mode", "payment_mode"),
    "instrument_no": ("instnum", "instrument", "inst_num", "instrument_no"),
}


def split_csv_line(line: str) -> List[str]:
    """
    Split one CSV line on commas outside double quotes.

    Quotes only toggle the in-quotes state and are dropped; escaped quotes
    ("") are not supported.
    """
    columns: List[str] = []
    current: List[str] = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            columns.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    columns.append("".join(current).strip())
    return columns


def normalize_header(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", str(name).strip().lower())


def _is_null(s: Optional[str]) -> bool:
    return s is not None and s.strip().upper() == "NULL"


def parse_amount(x: Optional[str]) -> float:
    """
    Parse numeric strings like '248,000' or '(2,775)' into float.

    Separators and parentheses are stripped; anything unreadable is 0.0.
    """
    if x is None:
        return 0.0
    s = str(x).strip()
    if s in ("", "-") or _is_null(s):
        return 0.0
    s = s.replace(",", "").replace("(", "").replace(")", "").strip()
    try:
        value = float(s)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


class HeaderIndex:
    """Resolves canonical fields to column positions of one export header."""

    def __init__(self, headers: List[str]):
        self.headers = list(headers)
        self._normalized = [normalize_header(h) for h in headers]
        self._cache: Dict[str, int] = {}

    def index_of(self, field: str) -> int:
        if field in self._cache:
            return self._cache[field]
        idx = -1
        for alias in FIELD_ALIASES[field]:
            target = normalize_header(alias)
            if target in self._normalized:
                idx = self._normalized.index(target)
                break
        self._cache[field] = idx
        return idx

    def has(self, field: str) -> bool:
        return self.index_of(field) != -1

    def cell(self, row: List[str], field: str) -> Optional[str]:
        """Cell text for a field, None if the column/cell is absent, '' for NULL."""
        idx = self.index_of(field)
        if idx == -1 or idx >= len(row):
            return None
        val = row[idx].strip()
        if _is_null(val):
            return ""
        return val

    def text(self, row: List[str], field: str, default: str = "") -> str:
        return self.cell(row, field) or default

    def amount(self, row: List[str], field: str) -> float:
        return parse_amount(self.cell(row, field))


@dataclass
class MappedRow:
    """One accepted export row: owner/file attributes plus its ledger line."""
    cnic: str
    cnic_key: str
    item_code: str
    owner_name: str
    owner_phone: str
    plot_value: float
    currency_no: str
    plot_size: str
    father_name: str
    cell_no: str
    reg_date: str
    address: str
    transaction: Transaction


def map_row(cells: List[str], index: HeaderIndex, seq: int) -> Optional[MappedRow]:
    """Map one tokenized row; None when CNIC or item code is missing."""
    raw_cnic = index.text(cells, "owner_cnic")
    cnic_key = normalize_cnic(raw_cnic)
    item_code = index.text(cells, "item_code")
    if not cnic_key or not item_code:
        return None

    plot_value = index.amount(cells, "plot_value")
    receivable = index.amount(cells, "receivable")
    paid = index.amount(cells, "amount_paid")

    status = index.text(cells, "status")
    if not status:
        status = "Paid" if receivable > 0 and paid >= receivable else "Unpaid"

    txn = Transaction(
        seq=seq,
        trans_id=int(index.amount(cells, "trans_id")) or seq,
        line_id=int(index.amount(cells, "line_id")),
        short_name=index.text(cells, "short_name", item_code),
        due_date=index.text(cells, "due_date", "-"),
        receivable=receivable,
        installment_no=int(index.amount(cells, "installment_no")),
        installment_name=index.text(cells, "installment_name"),
        trans_type=index.text(cells, "trans_type", "13"),
        item_code=item_code,
        plot_type=index.text(cells, "plot_type", "Residential"),
        currency="PKR",
        description=index.text(cells, "description"),
        doc_total=plot_value,
        status=status,
        balance=index.amount(cells, "balance"),
        outstanding=index.amount(cells, "outstanding"),
        pay_src=index.amount(cells, "pay_src"),
        amount_paid=paid,
        receipt_date=index.text(cells, "receipt_date"),
        mode=index.text(cells, "mode"),
        surcharge=index.amount(cells, "surcharge"),
        instrument_no=index.text(cells, "instrument_no"),
    )

    return MappedRow(
        cnic=raw_cnic,
        cnic_key=cnic_key,
        item_code=item_code,
        owner_name=index.text(cells, "owner_name"),
        owner_phone=index.text(cells, "owner_phone"),
        plot_value=plot_value,
        currency_no=index.text(cells, "currency_no", "-"),
        plot_size=index.text(cells, "plot_size", "Plot"),
        father_name=index.text(cells, "father_name", "-"),
        cell_no=index.text(cells, "cell_no", "-"),
        reg_date=index.text(cells, "reg_date", "-"),
        address=index.text(cells, "address", "-"),
        transaction=txn,
    )
