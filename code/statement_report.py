#!/usr/bin/env python3
"""
statement_report.py

Renders account statements from the saved registry to Excel.

Every statement is recomputed from the file's transactions; the summary
fields stored in the registry are only echoed for comparison.

Usage:
  python statement_report.py --file_no DGFD1-01001 --as_of 2025-06-30
  python statement_report.py                       # every file in the registry
"""

from __future__ import annotations

import argparse
import sys

from ledger.dates import today_midnight
from ledger.errors import RegistryError
from ledger.io import ensure_dirs, load_settings
from ledger.portfolio import file_status, portfolio_summary
from ledger.statement import build_statement, format_amount, save_statement_excel
from ledger.store import load_registry


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Render account statements to Excel")
    ap.add_argument("--file_no", type=str, help="Only this file (item code)")
    ap.add_argument("--registry", type=str, help="Registry JSON path")
    ap.add_argument("--output_dir", type=str, help="Output directory")
    ap.add_argument("--as_of", type=str, help="Reference day YYYY-MM-DD for overdue (default: today)")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        s = load_settings(args.registry, args.output_dir)
        as_of = today_midnight(args.as_of)
        _, files = load_registry(s.registry_json)
    except (ValueError, RegistryError) as e:
        print(f"[ERROR] {e}")
        return 1

    if args.file_no:
        files = [f for f in files if f.file_no == args.file_no]
        if not files:
            print(f"[ERROR] File not found in registry: {args.file_no}")
            return 1

    if not files:
        print("[WARNING] Registry has no property files; nothing to render.")
        return 0

    ensure_dirs(s)
    print(f"[INFO] Rendering {len(files)} statement(s) as of {as_of.isoformat()}")

    for f in files:
        st = build_statement(f, as_of)
        out = save_statement_excel(st, s.statements_dir / f"statement_{f.file_no}.xlsx")
        t = st.totals
        print(f"\n{f.file_no}  {f.owner_name}  [{file_status(f, as_of)}]")
        print(f"  Receivable: {format_amount(t.grand_receivable)}")
        print(f"  Received:   {format_amount(t.grand_received)}")
        print(f"  Balance:    {format_amount(t.grand_balance)}  (stored: {format_amount(f.balance)})")
        print(f"  Surcharge:  {format_amount(t.grand_surcharge)}")
        print(f"  Overdue:    {format_amount(t.total_overdue)}")
        if st.overdue_installments:
            print(f"  Overdue installments: {st.overdue_installments}")
        print(f"  [OK] {out}")

    summary = portfolio_summary(files)
    print(f"\nCollection index: {summary['collection_index']}%")
    return 0


if __name__ == "__main__":
    sys.exit(main())
