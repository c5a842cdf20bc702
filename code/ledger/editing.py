"""
editing.py

Admin-side manual ledger edits.

Saving an edited ledger sums rows flat (paid and outstanding) rather than
regrouping installments, so a saved file's balance can differ from the one a
statement shows. Use aggregation.recompute for the grouped figures.
"""

from __future__ import annotations

from dataclasses import fields, replace
from typing import Any, List

from .csv_mapper import parse_amount
from .dates import today_midnight
from .models import PropertyFile, Transaction

_EDITABLE = {f.name for f in fields(Transaction)}
_AMOUNT_FIELDS = ("receivable", "amount_paid")


def edit_transaction(t: Transaction, field_name: str, value: Any) -> Transaction:
    """Copy of the row with one field changed; keeps outstanding in step."""
    if field_name not in _EDITABLE:
        raise ValueError(f"Unknown transaction field: {field_name}")

    if field_name in _AMOUNT_FIELDS:
        value = parse_amount(value)

    updated = replace(t, **{field_name: value})
    if field_name in _AMOUNT_FIELDS:
        updated.outstanding = max(0.0, (updated.receivable or 0.0) - (updated.amount_paid or 0.0))
    return updated


def new_transaction(pf: PropertyFile, existing: List[Transaction], as_of=None) -> Transaction:
    n = len(existing) + 1
    return Transaction(
        seq=n,
        trans_id=n,
        line_id=0,
        short_name="",
        due_date=today_midnight(as_of).strftime("%d-%m-%Y"),
        receivable=0.0,
        installment_no=n,
        installment_name="INSTALLMENT",
        item_code=pf.file_no,
        doc_total=pf.plot_value,
        status="Unpaid",
        outstanding=0.0,
        amount_paid=0.0,
        mode="Cash",
    )


def delete_transaction(transactions: List[Transaction], index: int) -> List[Transaction]:
    if index < 0 or index >= len(transactions):
        raise IndexError(f"No transaction at position {index}")
    return [t for i, t in enumerate(transactions) if i != index]


def save_ledger(pf: PropertyFile, transactions: List[Transaction]) -> PropertyFile:
    ordered = sorted(transactions, key=lambda t: t.seq)
    return replace(
        pf,
        transactions=ordered,
        payment_received=sum(t.amount_paid or 0.0 for t in ordered),
        balance=sum(t.outstanding or 0.0 for t in ordered),
    )
