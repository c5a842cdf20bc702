"""
models.py

Registry records: ledger transactions, property files and portal users.

Field names follow Python conventions; the SAP column each one comes from is
noted where it is not obvious (see csv_mapper.FIELD_ALIASES for the full list).
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional


def normalize_cnic(text: Optional[str]) -> str:
    """Keep digits and 'X' only; used as the user <-> file join key."""
    if not text:
        return ""
    return re.sub(r"[^0-9X]", "", str(text))


def _from_dict(cls, data: Dict[str, Any]):
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class Transaction:
    seq: int = 0
    trans_id: int = 0
    line_id: int = 0
    short_name: str = ""
    due_date: str = "-"
    receivable: Optional[float] = None
    installment_no: int = 0          # u_intno; 0 = not part of the payment plan
    installment_name: str = ""       # u_intname
    trans_type: str = "13"
    item_code: str = ""
    plot_type: str = "Residential"
    currency: str = "PKR"
    description: str = ""
    doc_total: float = 0.0
    status: str = ""
    balance: float = 0.0
    outstanding: float = 0.0         # balduedeb, authoritative from the source
    pay_src: Optional[float] = None
    amount_paid: float = 0.0
    receipt_date: str = ""
    mode: str = ""
    surcharge: float = 0.0
    instrument_no: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        return _from_dict(cls, data)


@dataclass
class PropertyFile:
    file_no: str                     # item code
    currency_no: str = "-"
    plot_size: str = "Plot"
    plot_value: float = 0.0
    balance: float = 0.0
    receivable: float = 0.0
    total_receivable: float = 0.0
    payment_received: float = 0.0
    surcharge: float = 0.0
    overdue: float = 0.0
    owner_name: str = ""
    owner_cnic: str = ""
    father_name: str = "-"
    cell_no: str = "-"
    reg_date: str = "-"
    address: str = "-"
    plot_no: str = "-"
    block: str = "-"
    park: str = "-"
    corner: str = "-"
    main_boulevard: str = "-"
    transactions: List[Transaction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertyFile":
        pf = _from_dict(cls, data)
        pf.transactions = [
            t if isinstance(t, Transaction) else Transaction.from_dict(t)
            for t in (data.get("transactions") or [])
        ]
        return pf


@dataclass
class User:
    id: str
    cnic: str
    name: str
    email: str = ""
    phone: str = "-"
    role: str = "CLIENT"
    status: str = "Active"
    password: Optional[str] = None
    last_login: Optional[str] = None

    @property
    def cnic_key(self) -> str:
        return normalize_cnic(self.cnic)

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return _from_dict(cls, data)
