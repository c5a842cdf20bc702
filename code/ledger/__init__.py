"""
Ledger reconciliation for SAP Business One property-file exports.
"""

from .aggregation import LedgerTotals, recompute, receipt_steps, summarize_ledger
from .dates import parse_ledger_date
from .errors import LedgerImportError, RegistryError
from .grouping import GroupedLedger, InstallmentGroup, group_transactions
from .importer import ImportBatch, parse_registry_csv, read_registry_csv
from .merge import MergeMode, merge_registry
from .models import PropertyFile, Transaction, User, normalize_cnic
from .statement import build_statement

__all__ = [
    "LedgerTotals",
    "recompute",
    "receipt_steps",
    "summarize_ledger",
    "parse_ledger_date",
    "LedgerImportError",
    "RegistryError",
    "GroupedLedger",
    "InstallmentGroup",
    "group_transactions",
    "ImportBatch",
    "parse_registry_csv",
    "read_registry_csv",
    "MergeMode",
    "merge_registry",
    "PropertyFile",
    "Transaction",
    "User",
    "normalize_cnic",
    "build_statement",
]
