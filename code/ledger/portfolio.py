"""
portfolio.py

Portfolio-level views over many property files: per-owner filtering, file
status badges, payment alerts and collection totals.

These work row by row on the source outstanding (balduedeb) and do not
regroup installments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd

from .dates import EPOCH, parse_ledger_date, today_midnight
from .models import PropertyFile, Transaction, User, normalize_cnic

STATUS_ACTION_REQUIRED = "Action Required"
STATUS_ACTIVE = "Active Ledger"
STATUS_CLEAR = "Clearance Verified"


@dataclass
class Alert:
    file_no: str
    plot_size: str
    transaction: Transaction
    is_overdue: bool

    @property
    def amount(self) -> float:
        if self.is_overdue:
            return self.transaction.outstanding or 0.0
        return self.transaction.receivable or 0.0


def files_for_user(files: List[PropertyFile], user: User) -> List[PropertyFile]:
    key = normalize_cnic(user.cnic)
    return [f for f in files if normalize_cnic(f.owner_cnic) == key]


def _overdue_rows(pf: PropertyFile, today) -> List[Transaction]:
    rows = []
    for t in pf.transactions:
        d = parse_ledger_date(t.due_date)
        if d is not None and d < today and (t.outstanding or 0.0) > 0:
            rows.append(t)
    return rows


def file_status(pf: PropertyFile, as_of=None) -> str:
    today = today_midnight(as_of)
    if _overdue_rows(pf, today):
        return STATUS_ACTION_REQUIRED
    if pf.balance > 0:
        return STATUS_ACTIVE
    return STATUS_CLEAR


def file_alert(pf: PropertyFile, as_of=None) -> Optional[Alert]:
    """Oldest overdue row, else the next unpaid commitment on or after today."""
    today = today_midnight(as_of)
    overdue = sorted(_overdue_rows(pf, today), key=lambda t: parse_ledger_date(t.due_date) or EPOCH)
    if overdue:
        return Alert(pf.file_no, pf.plot_size, overdue[0], True)

    for t in pf.transactions:
        d = parse_ledger_date(t.due_date)
        if d is None or d < today:
            continue
        if not t.amount_paid and (t.receivable or 0.0) > 0:
            return Alert(pf.file_no, pf.plot_size, t, False)
    return None


def portfolio_alerts(files: List[PropertyFile], as_of=None) -> List[Alert]:
    alerts = [a for a in (file_alert(f, as_of) for f in files) if a is not None]
    # stable: overdue first, file order otherwise kept
    return sorted(alerts, key=lambda a: 0 if a.is_overdue else 1)


def _recovery_pct(pf: PropertyFile) -> int:
    # stored payment_received against plot value
    if pf.plot_value > 0:
        return round(pf.payment_received / pf.plot_value * 100)
    return 0


def portfolio_frame(files: List[PropertyFile]) -> pd.DataFrame:
    records = []
    for f in files:
        records.append({
            "File_No": f.file_no,
            "Owner": f.owner_name,
            "Plot_Size": f.plot_size,
            "Plot_Value": f.plot_value,
            "Received": sum(t.amount_paid or 0.0 for t in f.transactions),
            "Outstanding": sum(t.outstanding or 0.0 for t in f.transactions),
            "Surcharge": sum(t.surcharge or 0.0 for t in f.transactions),
            "Balance": f.balance,
            "Recovery_Pct": _recovery_pct(f),
        })
    return pd.DataFrame(
        records,
        columns=["File_No", "Owner", "Plot_Size", "Plot_Value", "Received", "Outstanding", "Surcharge", "Balance", "Recovery_Pct"],
    )


def portfolio_summary(files: List[PropertyFile]) -> Dict[str, float]:
    df = portfolio_frame(files)
    totals = df[["Plot_Value", "Received", "Outstanding", "Surcharge"]].sum()

    plot_value = float(totals["Plot_Value"])
    received = float(totals["Received"])
    outstanding = float(totals["Outstanding"])
    denom = received + outstanding
    collection_index = round(received / denom * 100) if plot_value > 0 and denom > 0 else 0

    return {
        "total_plot_value": plot_value,
        "total_received": received,
        "total_outstanding": outstanding,
        "total_surcharge": float(totals["Surcharge"]),
        "collection_index": collection_index,
    }


def admin_stats(files: List[PropertyFile]) -> Dict[str, float]:
    df = portfolio_frame(files)
    return {
        "total_collection": float(df["Received"].sum()),
        "total_outstanding": float(df["Balance"].sum()),
        "file_count": len(df),
    }
