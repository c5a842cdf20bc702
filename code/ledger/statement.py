"""
statement.py

Account statement for one property file.

Totals are always re-derived here from the transactions; the summary fields
stored on the PropertyFile are not trusted for display.

Output
------
statement_frames() returns three tables:
- Payment_Plan: one line per receipt (or one line for an unpaid installment)
- Other:        one-off charges in ledger order
- Summary:      plan and grand totals plus total overdue
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .aggregation import (
    LedgerTotals,
    OverdueItem,
    ReceiptStep,
    overdue_items,
    receipt_steps,
    summarize_ledger,
)
from .dates import is_past_due, today_midnight
from .grouping import GroupedLedger, group_transactions
from .models import PropertyFile

STATEMENT_COLS = [
    "Due_Date", "Inst_No", "Description", "Receivable",
    "Receipt_Date", "Mode", "Instrument_No", "Amount_Paid",
    "OS_Balance", "Surcharge", "Overdue",
]


@dataclass
class Statement:
    file: PropertyFile
    as_of: date
    grouped: GroupedLedger
    steps: Dict[int, List[ReceiptStep]]
    totals: LedgerTotals
    overdue: List[OverdueItem]

    @property
    def overdue_installments(self) -> List[int]:
        return [i.ref for i in self.overdue if i.kind == "PLAN"]


def build_statement(pf: PropertyFile, as_of=None) -> Statement:
    today = today_midnight(as_of)
    grouped = group_transactions(pf.transactions)
    return Statement(
        file=pf,
        as_of=today,
        grouped=grouped,
        steps={g.installment_no: receipt_steps(g) for g in grouped.plan},
        totals=summarize_ledger(grouped, today),
        overdue=overdue_items(grouped, today),
    )


def format_amount(v: Optional[float]) -> str:
    if v is None or v == 0:
        return "-"
    return f"{round(v):,}"


def _plan_rows(st: Statement) -> List[dict]:
    rows = []
    flagged = set(st.overdue_installments)
    for g in st.grouped.plan:
        d = g.definition
        highlight = g.installment_no in flagged
        steps = st.steps[g.installment_no]
        if not steps:
            rows.append({
                "Due_Date": d.due_date, "Inst_No": g.installment_no,
                "Description": d.installment_name.upper(), "Receivable": g.receivable,
                "Receipt_Date": "", "Mode": "", "Instrument_No": "",
                "Amount_Paid": 0.0, "OS_Balance": g.receivable, "Surcharge": 0.0,
                "Overdue": highlight,
            })
            continue
        for i, s in enumerate(steps):
            first = i == 0
            r = s.receipt
            rows.append({
                "Due_Date": d.due_date if first else "",
                "Inst_No": g.installment_no if first else None,
                "Description": d.installment_name.upper() if first else "",
                "Receivable": g.receivable if first else None,
                "Receipt_Date": r.receipt_date,
                "Mode": r.mode,
                "Instrument_No": r.instrument_no,
                "Amount_Paid": r.amount_paid or 0.0,
                "OS_Balance": s.display_balance,
                "Surcharge": r.surcharge or 0.0,
                "Overdue": highlight,
            })
    return rows


def _other_rows(st: Statement) -> List[dict]:
    rows = []
    for t in st.grouped.other:
        os_bal = t.outstanding or 0.0
        rows.append({
            "Due_Date": t.due_date, "Inst_No": None,
            "Description": (t.installment_name or "Other").upper(),
            "Receivable": t.receivable or 0.0,
            "Receipt_Date": t.receipt_date or "-", "Mode": t.mode or "-",
            "Instrument_No": t.instrument_no or "-",
            "Amount_Paid": t.amount_paid or 0.0, "OS_Balance": os_bal,
            "Surcharge": t.surcharge or 0.0,
            "Overdue": os_bal > 0 and is_past_due(t.due_date, st.as_of),
        })
    return rows


def statement_frames(st: Statement) -> Dict[str, pd.DataFrame]:
    tot = st.totals
    summary = pd.DataFrame([
        {"Line": "Total Payment Plan", "Receivable": tot.plan_receivable,
         "Received": tot.plan_received, "Balance": tot.plan_balance,
         "Surcharge": tot.plan_surcharge},
        {"Line": "Other", "Receivable": tot.other_receivable,
         "Received": tot.other_received,
         "Balance": max(0.0, tot.other_receivable - tot.other_received),
         "Surcharge": tot.other_surcharge},
        {"Line": "Grand Total", "Receivable": tot.grand_receivable,
         "Received": tot.grand_received, "Balance": tot.grand_balance,
         "Surcharge": tot.grand_surcharge},
    ])
    summary["Overdue"] = [None, None, tot.total_overdue]

    return {
        "Payment_Plan": pd.DataFrame(_plan_rows(st), columns=STATEMENT_COLS),
        "Other": pd.DataFrame(_other_rows(st), columns=STATEMENT_COLS),
        "Summary": summary,
    }


def save_statement_excel(st: Statement, path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        for name, df in statement_frames(st).items():
            df.to_excel(writer, sheet_name=name[:31], index=False)
    return out
