#!/usr/bin/env python3
"""
test_editing.py

Unit tests for ledger.editing

Tests:
- Row edits keep outstanding = max(0, receivable - paid)
- Blank row defaults for admin-added lines
- Saving sums paid / outstanding flat over all rows (no regrouping)
"""

import unittest
import sys
from datetime import date
from pathlib import Path

# Add code directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "code"))

from ledger.aggregation import recompute
from ledger.editing import delete_transaction, edit_transaction, new_transaction, save_ledger
from ledger.models import PropertyFile, Transaction


class TestEditTransaction(unittest.TestCase):

    def test_receivable_edit_recomputes_outstanding(self):
        t = Transaction(seq=1, receivable=1000, amount_paid=300, outstanding=0)
        out = edit_transaction(t, "receivable", 1500)
        self.assertEqual(out.outstanding, 1200)
        self.assertEqual(t.receivable, 1000)

    def test_paid_edit_clamps_at_zero(self):
        t = Transaction(seq=1, receivable=1000, amount_paid=0, outstanding=1000)
        out = edit_transaction(t, "amount_paid", 1200)
        self.assertEqual(out.outstanding, 0)

    def test_form_text_amounts_coerced(self):
        t = Transaction(seq=1, receivable=1000, amount_paid=300, outstanding=700)
        out = edit_transaction(t, "receivable", "1,500")
        self.assertEqual(out.receivable, 1500.0)
        self.assertEqual(out.outstanding, 1200)

        out = edit_transaction(out, "amount_paid", "abc")
        self.assertEqual(out.amount_paid, 0.0)
        self.assertEqual(out.outstanding, 1500)

    def test_other_field_leaves_outstanding(self):
        t = Transaction(seq=1, receivable=1000, amount_paid=0, outstanding=777)
        out = edit_transaction(t, "mode", "Online")
        self.assertEqual(out.mode, "Online")
        self.assertEqual(out.outstanding, 777)

    def test_unknown_field_rejected(self):
        with self.assertRaises(ValueError):
            edit_transaction(Transaction(), "balduedeb", 5)


class TestRowManagement(unittest.TestCase):

    def setUp(self):
        self.pf = PropertyFile(file_no="DGFD1-01001", plot_value=7750000)

    def test_new_transaction_defaults(self):
        existing = [Transaction(seq=1), Transaction(seq=2)]
        t = new_transaction(self.pf, existing, as_of=date(2026, 10, 19))
        self.assertEqual(t.seq, 3)
        self.assertEqual(t.installment_no, 3)
        self.assertEqual(t.installment_name, "INSTALLMENT")
        self.assertEqual(t.due_date, "19-10-2026")
        self.assertEqual(t.item_code, "DGFD1-01001")
        self.assertEqual(t.doc_total, 7750000)
        self.assertEqual(t.mode, "Cash")
        self.assertEqual(t.status, "Unpaid")

    def test_delete_transaction(self):
        rows = [Transaction(seq=1), Transaction(seq=2), Transaction(seq=3)]
        self.assertEqual([t.seq for t in delete_transaction(rows, 1)], [1, 3])
        with self.assertRaises(IndexError):
            delete_transaction(rows, 5)


class TestSaveLedger(unittest.TestCase):

    def test_flat_sums_and_seq_order(self):
        pf = PropertyFile(file_no="F1", overdue=99, surcharge=11)
        rows = [
            Transaction(seq=2, amount_paid=400, outstanding=0),
            Transaction(seq=1, receivable=1000, outstanding=1000),
        ]
        saved = save_ledger(pf, rows)
        self.assertEqual([t.seq for t in saved.transactions], [1, 2])
        self.assertEqual(saved.payment_received, 400)
        self.assertEqual(saved.balance, 1000)
        # untouched by the manual path
        self.assertEqual(saved.overdue, 99)
        self.assertEqual(saved.surcharge, 11)

    def test_flat_path_differs_from_grouped_recompute(self):
        rows = [
            Transaction(seq=1, installment_no=4, receivable=1000, outstanding=1000),
            Transaction(seq=2, installment_no=4, amount_paid=400, receipt_date="01-Jan-25", outstanding=0),
        ]
        pf = PropertyFile(file_no="F1", transactions=rows)
        self.assertEqual(save_ledger(pf, rows).balance, 1000)
        self.assertEqual(recompute(pf, as_of=date(2025, 6, 1)).balance, 600)


if __name__ == "__main__":
    unittest.main(verbosity=2)
