"""
grouping.py

Installment grouping for one property file's ledger.

Rows with u_intno > 0 form the payment plan: each installment number becomes
one group made of a definition row (what is owed, and when) and the receipts
paid against it. Rows with u_intno == 0 are one-off charges ("other").

Pure and deterministic; used both at import time and when rendering a
statement.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List

from .dates import sort_date
from .models import Transaction


@dataclass
class InstallmentGroup:
    installment_no: int
    definition: Transaction
    receipts: List[Transaction] = field(default_factory=list)

    @property
    def receivable(self) -> float:
        return self.definition.receivable or 0.0

    @property
    def total_paid(self) -> float:
        return sum(r.amount_paid or 0.0 for r in self.receipts)

    @property
    def total_surcharge(self) -> float:
        return sum(r.surcharge or 0.0 for r in self.receipts)


@dataclass
class GroupedLedger:
    plan: List[InstallmentGroup]
    other: List[Transaction]


def is_receipt(t: Transaction) -> bool:
    """A row carries payment evidence: an amount, a surcharge or a receipt date."""
    has_payment = bool(t.amount_paid)
    has_surcharge = bool(t.surcharge)
    rdate = (t.receipt_date or "").strip()
    has_date = rdate != "" and rdate.upper() != "NULL"
    return has_payment or has_surcharge or has_date


def _blank_definition(t: Transaction) -> Transaction:
    # Placeholder until a row with a positive receivable shows up.
    return replace(t, amount_paid=0.0, receipt_date="", surcharge=0.0, mode="", instrument_no="")


def group_transactions(transactions: Iterable[Transaction]) -> GroupedLedger:
    groups: Dict[int, InstallmentGroup] = {}
    other: List[Transaction] = []

    for t in transactions:
        if t.installment_no > 0:
            g = groups.get(t.installment_no)
            if g is None:
                g = InstallmentGroup(t.installment_no, _blank_definition(t))
                groups[t.installment_no] = g

            # last positive-receivable row wins
            if t.receivable and t.receivable > 0:
                g.definition = t

            if is_receipt(t):
                g.receipts.append(t)
        else:
            other.append(t)

    for g in groups.values():
        g.receipts.sort(key=lambda r: sort_date(r.receipt_date))

    return GroupedLedger(
        plan=sorted(groups.values(), key=lambda g: g.installment_no),
        other=sorted(other, key=lambda t: t.seq),
    )
