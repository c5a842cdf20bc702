#!/usr/bin/env python3
"""
test_portfolio.py

Unit tests for ledger.portfolio

Tests:
- Client file filtering by normalized CNIC
- File status badges
- Payment alerts (oldest overdue first, else next commitment)
- Collection totals and index
"""

import unittest
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

# Add code directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "code"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from _ledger_fixtures import cleared_file, client, sample_file
from ledger.models import Transaction
from ledger.portfolio import (
    STATUS_ACTION_REQUIRED,
    STATUS_ACTIVE,
    STATUS_CLEAR,
    admin_stats,
    file_alert,
    file_status,
    files_for_user,
    portfolio_alerts,
    portfolio_frame,
    portfolio_summary,
)

AS_OF = date(2025, 6, 1)


def _without_transfer(pf):
    return replace(pf, transactions=[t for t in pf.transactions if t.installment_no != 0])


class TestFilesForUser(unittest.TestCase):

    def test_cnic_formatting_ignored(self):
        files = [sample_file(cnic="33201-1691812-5"), cleared_file()]
        mine = files_for_user(files, client(cnic="3320116918125"))
        self.assertEqual([f.file_no for f in mine], ["DGFD1-01001"])


class TestFileStatus(unittest.TestCase):

    def test_action_required(self):
        self.assertEqual(file_status(sample_file(), AS_OF), STATUS_ACTION_REQUIRED)

    def test_active(self):
        self.assertEqual(file_status(_without_transfer(sample_file()), AS_OF), STATUS_ACTIVE)

    def test_clear(self):
        self.assertEqual(file_status(cleared_file(), AS_OF), STATUS_CLEAR)


class TestAlerts(unittest.TestCase):

    def test_overdue_alert(self):
        alert = file_alert(sample_file(), AS_OF)
        self.assertTrue(alert.is_overdue)
        self.assertEqual(alert.transaction.seq, 4)
        self.assertEqual(alert.amount, 5000)

    def test_oldest_overdue_wins(self):
        pf = sample_file()
        pf.transactions.append(Transaction(seq=5, due_date="01-Jan-25", receivable=900, outstanding=900))
        self.assertEqual(file_alert(pf, AS_OF).transaction.seq, 5)

    def test_upcoming_alert(self):
        alert = file_alert(_without_transfer(sample_file()), AS_OF)
        self.assertFalse(alert.is_overdue)
        self.assertEqual(alert.transaction.installment_no, 17)
        self.assertEqual(alert.amount, 47000)

    def test_no_alert(self):
        self.assertIsNone(file_alert(cleared_file(), AS_OF))

    def test_portfolio_alerts_overdue_first(self):
        files = [_without_transfer(sample_file(file_no="A")), cleared_file(), sample_file(file_no="B")]
        alerts = portfolio_alerts(files, AS_OF)
        self.assertEqual([(a.file_no, a.is_overdue) for a in alerts], [("B", True), ("A", False)])


class TestPortfolioTotals(unittest.TestCase):

    def test_frame(self):
        df = portfolio_frame([sample_file(), cleared_file()])
        self.assertEqual(list(df["File_No"]), ["DGFD1-01001", "DGFD2-00100"])
        self.assertEqual(df.loc[0, "Received"], 248000)
        self.assertEqual(df.loc[0, "Outstanding"], 52000)

    def test_recovery_pct_per_file(self):
        no_value = replace(cleared_file(file_no="Z"), plot_value=0.0)
        df = portfolio_frame([sample_file(), cleared_file(), no_value])
        self.assertEqual(list(df["Recovery_Pct"]), [3, 10, 0])

    def test_collection_index(self):
        summary = portfolio_summary([sample_file()])
        self.assertEqual(summary["total_received"], 248000)
        self.assertEqual(summary["total_outstanding"], 52000)
        self.assertEqual(summary["collection_index"], 83)

    def test_empty_portfolio(self):
        summary = portfolio_summary([])
        self.assertEqual(summary["collection_index"], 0)
        self.assertEqual(summary["total_received"], 0)

    def test_admin_stats(self):
        stats = admin_stats([sample_file(), cleared_file()])
        self.assertEqual(stats["file_count"], 2)
        self.assertEqual(stats["total_collection"], 548000)
        self.assertEqual(stats["total_outstanding"], 52000)


if __name__ == "__main__":
    unittest.main(verbosity=2)
