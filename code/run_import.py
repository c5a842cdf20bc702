#!/usr/bin/env python3
"""
run_import.py

Imports a SAP Business One registry export into the local registry.

Steps:
- Parse the CSV into users + property files (totals derived per file)
- Merge into the existing registry (MERGE = upsert by key, WIPE = replace)
- Save the registry JSON

The import is all-or-nothing: if the CSV is structurally invalid the
registry file is not touched.

Environment Variables:
- LEDGER_IMPORT_CSV:     default export to import
- LEDGER_REGISTRY_JSON:  registry file (required unless --registry)
- LEDGER_OUTPUT_DIR:     output folder (required unless --output_dir)
- LEDGER_IMPORT_MODE:    MERGE (default) or WIPE
- LEDGER_EMAIL_DOMAIN / LEDGER_DEFAULT_PASSWORD: placeholders for new users

Usage:
  python run_import.py --csv export.csv --mode merge --as_of 2025-06-30
"""

from __future__ import annotations

import argparse
import os
import sys

from ledger.dates import today_midnight
from ledger.errors import LedgerImportError, RegistryError
from ledger.importer import read_registry_csv
from ledger.io import ensure_dirs, load_settings
from ledger.merge import MergeMode, merge_registry
from ledger.store import load_registry, save_registry


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Import a SAP registry export")
    ap.add_argument("--csv", type=str, help="Registry export CSV (or LEDGER_IMPORT_CSV)")
    ap.add_argument("--mode", type=str, help="MERGE or WIPE (or LEDGER_IMPORT_MODE)")
    ap.add_argument("--registry", type=str, help="Registry JSON path")
    ap.add_argument("--output_dir", type=str, help="Output directory")
    ap.add_argument("--as_of", type=str, help="Reference day YYYY-MM-DD for overdue (default: today)")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        s = load_settings(args.registry, args.output_dir, args.mode)
        mode = MergeMode.parse(s.import_mode)
        as_of = today_midnight(args.as_of)
    except ValueError as e:
        print(f"[ERROR] {e}")
        return 1

    csv_path = args.csv or os.getenv("LEDGER_IMPORT_CSV")
    if not csv_path:
        print("[ERROR] Missing CSV. Provide --csv or set LEDGER_IMPORT_CSV in .env.")
        return 1

    print("=" * 60)
    print("REGISTRY IMPORT")
    print("=" * 60)
    print(f"Input:    {csv_path}")
    print(f"Registry: {s.registry_json}")
    print(f"Mode:     {mode.value}")
    print(f"As of:    {as_of.isoformat()}")
    print()

    try:
        batch = read_registry_csv(
            csv_path,
            as_of=as_of,
            email_domain=s.email_domain,
            default_password=s.default_password,
        )
    except FileNotFoundError as e:
        print(f"[ERROR] {e}")
        return 1
    except LedgerImportError as e:
        print(f"[ERROR] {LedgerImportError.USER_MESSAGE}")
        print(f"  Detail: {e.detail}")
        return 1

    print(f"[INFO] Rows read: {batch.rows_read} (dropped without CNIC/item code: {batch.rows_dropped})")
    print(f"[INFO] Parsed {len(batch.files)} files, {len(batch.users)} owners, {batch.transaction_count} ledger lines")

    try:
        users, files = load_registry(s.registry_json)
    except RegistryError as e:
        print(f"[ERROR] {e}")
        return 1

    users, files = merge_registry(users, files, batch.users, batch.files, mode)

    ensure_dirs(s)
    save_registry(s.registry_json, users, files)

    print(f"[OK] Registry now holds {len(files)} files and {len(users)} users")
    print(f"  Received:  {sum(f.payment_received for f in batch.files):,.0f}")
    print(f"  Balance:   {sum(f.balance for f in batch.files):,.0f}")
    print(f"  Overdue:   {sum(f.overdue for f in batch.files):,.0f}")
    print(f"  Saved to:  {s.registry_json}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
