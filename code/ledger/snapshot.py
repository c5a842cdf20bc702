"""
snapshot.py

Plain-dict registry snapshots handed to the assistant service.

Admins see every file, clients only their own. Figures come from the same
statement computation the portal displays.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .dates import sort_date
from .grouping import is_receipt
from .models import PropertyFile, User
from .portfolio import files_for_user
from .statement import build_statement


def portfolio_context(files: List[PropertyFile]) -> List[Dict[str, Any]]:
    return [
        {
            "id": f.file_no,
            "owner": f.owner_name,
            "size": f.plot_size,
            "totalVal": f.plot_value,
            "paid": f.payment_received,
            "balance": f.balance,
            "overdue": f.overdue,
        }
        for f in files
    ]


def _receipt_entries(st) -> List[Dict[str, Any]]:
    """Plan receipts with their installment balance, then paid one-off rows."""
    entries = []
    for g in st.grouped.plan:
        for step in st.steps[g.installment_no]:
            entries.append({
                "description": g.definition.installment_name,
                "dueDate": g.definition.due_date,
                "payable": g.receivable,
                "paid": step.receipt.amount_paid,
                "receiptDate": step.receipt.receipt_date,
                "balance": step.installment_balance,
            })
    for t in st.grouped.other:
        if is_receipt(t):
            entries.append({
                "description": t.installment_name or t.description,
                "dueDate": t.due_date,
                "payable": t.receivable or 0.0,
                "paid": t.amount_paid,
                "receiptDate": t.receipt_date,
                "balance": t.outstanding or 0.0,
            })
    # stable: undated receipts first, plan before other on equal dates
    entries.sort(key=lambda e: sort_date(e["receiptDate"]))
    return entries


def ledger_context(files: List[PropertyFile], receipts_limit: int = 5, as_of=None) -> List[Dict[str, Any]]:
    out = []
    for f in files:
        st = build_statement(f, as_of)
        receipts = _receipt_entries(st)
        recent = receipts[-receipts_limit:] if receipts_limit > 0 else []

        out.append({
            "id": f.file_no,
            "owner": f.owner_name,
            "size": f.plot_size,
            "payable": st.totals.grand_receivable,
            "paid": st.totals.grand_received,
            "balance": st.totals.grand_balance,
            "surcharge": st.totals.grand_surcharge,
            "overdue": st.totals.total_overdue,
            "overdueInstallments": st.overdue_installments,
            "recentReceipts": recent,
        })
    return out


def context_for_user(user: User, all_files: List[PropertyFile], receipts_limit: int = 5, as_of=None):
    files = all_files if user.is_admin else files_for_user(all_files, user)
    return ledger_context(files, receipts_limit=receipts_limit, as_of=as_of)
