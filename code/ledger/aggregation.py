"""
aggregation.py

Totals, running balances and overdue classification over a grouped ledger.

Overdue rule
------------
- Plan installment: due date (of its definition row) before the reference day
  AND receivable - sum(receipts paid) > 0. Contributes the remaining amount.
- Other row: due date before the reference day AND its own outstanding
  (balduedeb) > 0. Contributes the outstanding amount.
- Unreadable due dates are never overdue.

The reference day is always injectable (as_of) so results are reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional

from .dates import is_past_due, parse_ledger_date, today_midnight
from .grouping import GroupedLedger, InstallmentGroup, group_transactions
from .models import PropertyFile, Transaction


@dataclass
class ReceiptStep:
    receipt: Transaction
    cumulative_paid: float
    installment_balance: float
    cleared: bool
    is_last: bool

    @property
    def display_balance(self) -> Optional[float]:
        """Running balance shown on the last receipt only, while unpaid."""
        if self.is_last and self.installment_balance > 0:
            return self.installment_balance
        return None


@dataclass
class OverdueItem:
    kind: str                 # "PLAN" or "OTHER"
    ref: int                  # installment number or row seq
    label: str
    due_date: Optional[date]
    amount: float


@dataclass
class LedgerTotals:
    plan_receivable: float = 0.0
    plan_received: float = 0.0
    plan_surcharge: float = 0.0
    plan_balance: float = 0.0
    other_receivable: float = 0.0
    other_received: float = 0.0
    other_surcharge: float = 0.0
    grand_receivable: float = 0.0
    grand_received: float = 0.0
    grand_surcharge: float = 0.0
    grand_balance: float = 0.0
    total_overdue: float = 0.0


def receipt_steps(group: InstallmentGroup) -> List[ReceiptStep]:
    receivable = group.receivable
    cumulative = 0.0
    steps: List[ReceiptStep] = []
    last = len(group.receipts) - 1
    for i, r in enumerate(group.receipts):
        cumulative += r.amount_paid or 0.0
        steps.append(ReceiptStep(
            receipt=r,
            cumulative_paid=cumulative,
            installment_balance=max(0.0, receivable - cumulative),
            cleared=cumulative >= receivable,
            is_last=i == last,
        ))
    return steps


def remaining_for_installment(group: InstallmentGroup) -> float:
    return max(0.0, group.receivable - group.total_paid)


def overdue_items(grouped: GroupedLedger, as_of=None) -> List[OverdueItem]:
    today = today_midnight(as_of)
    items: List[OverdueItem] = []

    for g in grouped.plan:
        remaining = remaining_for_installment(g)
        if remaining > 0 and is_past_due(g.definition.due_date, today):
            items.append(OverdueItem(
                kind="PLAN",
                ref=g.installment_no,
                label=g.definition.installment_name,
                due_date=parse_ledger_date(g.definition.due_date),
                amount=remaining,
            ))

    for t in grouped.other:
        os_bal = t.outstanding or 0.0
        if os_bal > 0 and is_past_due(t.due_date, today):
            items.append(OverdueItem(
                kind="OTHER",
                ref=t.seq,
                label=t.installment_name or t.description,
                due_date=parse_ledger_date(t.due_date),
                amount=os_bal,
            ))

    return items


def summarize_ledger(grouped: GroupedLedger, as_of=None) -> LedgerTotals:
    tot = LedgerTotals()

    for g in grouped.plan:
        tot.plan_receivable += g.receivable
        tot.plan_received += g.total_paid
        tot.plan_surcharge += g.total_surcharge

    for t in grouped.other:
        tot.other_receivable += t.receivable or 0.0
        tot.other_received += t.amount_paid or 0.0
        tot.other_surcharge += t.surcharge or 0.0

    tot.plan_balance = max(0.0, tot.plan_receivable - tot.plan_received)
    tot.grand_receivable = tot.plan_receivable + tot.other_receivable
    tot.grand_received = tot.plan_received + tot.other_received
    tot.grand_surcharge = tot.plan_surcharge + tot.other_surcharge
    tot.grand_balance = max(0.0, tot.grand_receivable - tot.grand_received)
    tot.total_overdue = sum(i.amount for i in overdue_items(grouped, as_of))
    return tot


def recompute(pf: PropertyFile, as_of=None) -> PropertyFile:
    """
    Re-derive a file's summary fields from its transactions.

    This is the grouped computation shared with statement rendering. Manual
    ledger saves go through editing.save_ledger instead, which sums rows flat.
    """
    totals = summarize_ledger(group_transactions(pf.transactions), as_of)
    return replace(
        pf,
        transactions=list(pf.transactions),
        payment_received=totals.grand_received,
        surcharge=totals.grand_surcharge,
        balance=totals.grand_balance,
        overdue=totals.total_overdue,
        receivable=totals.grand_receivable,
        total_receivable=totals.grand_receivable,
    )
