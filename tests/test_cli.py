#!/usr/bin/env python3
"""
test_cli.py

Integration tests for run_import.py and statement_report.py

Tests:
- Import writes the registry; re-importing the same export changes nothing
- WIPE replaces, MERGE keeps files missing from the export
- A structurally invalid export leaves the registry untouched
- Statements are rendered for every file in the registry
"""

import unittest
import io
import json
import shutil
import subprocess
import sys
import tempfile
from contextlib import redirect_stdout
from pathlib import Path

# Add code directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "code"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

import run_import
import statement_report
from test_importer import HEADER, ROWS, _export

AS_OF = "2025-06-01"


class TestCliBase(unittest.TestCase):

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        self.registry = self.test_dir / "outputs" / "registry.json"
        self.output_dir = self.test_dir / "outputs"
        self.csv = self.test_dir / "export.csv"
        self.csv.write_text(_export(), encoding="utf-8")

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _run(self, module, *args):
        argv = ["--registry", str(self.registry), "--output_dir", str(self.output_dir),
                "--as_of", AS_OF, *args]
        buf = io.StringIO()
        with redirect_stdout(buf):
            code = module.main(argv)
        return code, buf.getvalue()

    def _import(self, *args):
        return self._run(run_import, "--csv", str(self.csv), *args)

    def _registry(self):
        return json.loads(self.registry.read_text(encoding="utf-8"))


class TestRunImport(TestCliBase):

    def test_import_writes_registry(self):
        code, out = self._import("--mode", "merge")
        self.assertEqual(code, 0, out)
        self.assertIn("[OK] Registry now holds 2 files and 2 users", out)

        data = self._registry()
        files = {f["file_no"]: f for f in data["files"]}
        self.assertEqual(files["DGFD1-01001"]["balance"], 52000)
        self.assertEqual(files["DGFD1-01001"]["overdue"], 5000)

    def test_reimport_is_idempotent(self):
        self._import("--mode", "merge")
        first = self.registry.read_text(encoding="utf-8")
        self._import("--mode", "merge")
        self.assertEqual(self.registry.read_text(encoding="utf-8"), first)

    def test_merge_keeps_unlisted_files_and_wipe_drops_them(self):
        self._import("--mode", "merge")
        self.csv.write_text(_export(ROWS[5:]), encoding="utf-8")

        self._import("--mode", "merge")
        self.assertEqual(len(self._registry()["files"]), 2)

        self._import("--mode", "wipe")
        self.assertEqual([f["file_no"] for f in self._registry()["files"]], ["DGFD2-00500"])

    def test_invalid_export_leaves_registry_untouched(self):
        self._import("--mode", "merge")
        before = self.registry.read_text(encoding="utf-8")

        self.csv.write_text(HEADER + "\n", encoding="utf-8")
        code, out = self._import("--mode", "merge")
        self.assertEqual(code, 1)
        self.assertIn("Import Error: Please verify the CSV format and column headers.", out)
        self.assertEqual(self.registry.read_text(encoding="utf-8"), before)

    def test_wipe_with_incomplete_header_keeps_registry(self):
        self._import("--mode", "merge")
        before = self.registry.read_text(encoding="utf-8")

        self.csv.write_text("ItemCode,Receivable\nDGFD1-01001,1000\n", encoding="utf-8")
        code, out = self._import("--mode", "wipe")
        self.assertEqual(code, 1)
        self.assertIn("Detail: Header is missing identity column(s)", out)
        self.assertEqual(self.registry.read_text(encoding="utf-8"), before)

    def test_missing_csv(self):
        code, out = self._run(run_import, "--csv", str(self.test_dir / "nope.csv"), "--mode", "merge")
        self.assertEqual(code, 1)
        self.assertIn("[ERROR]", out)
        self.assertFalse(self.registry.exists())

    def test_unknown_mode(self):
        code, out = self._import("--mode", "sideways")
        self.assertEqual(code, 1)
        self.assertIn("[ERROR]", out)

    def test_script_runs_standalone(self):
        result = subprocess.run(
            [sys.executable, str(Path(run_import.__file__)),
             "--csv", str(self.csv), "--registry", str(self.registry),
             "--output_dir", str(self.output_dir), "--mode", "merge", "--as_of", AS_OF],
            capture_output=True,
            text=True,
            cwd=str(self.test_dir),
        )
        self.assertEqual(result.returncode, 0, f"run_import failed: {result.stderr}")
        self.assertIn("[OK] Registry now holds", result.stdout)


class TestStatementReport(TestCliBase):

    def test_renders_all_files(self):
        self._import("--mode", "merge")
        code, out = self._run(statement_report)
        self.assertEqual(code, 0, out)
        statements = self.output_dir / "statements"
        self.assertTrue((statements / "statement_DGFD1-01001.xlsx").exists())
        self.assertTrue((statements / "statement_DGFD2-00500.xlsx").exists())
        self.assertIn("Collection index:", out)

    def test_single_file(self):
        self._import("--mode", "merge")
        code, out = self._run(statement_report, "--file_no", "DGFD2-00500")
        self.assertEqual(code, 0, out)
        self.assertIn("[Action Required]", out)
        self.assertFalse((self.output_dir / "statements" / "statement_DGFD1-01001.xlsx").exists())

    def test_unknown_file(self):
        self._import("--mode", "merge")
        code, out = self._run(statement_report, "--file_no", "NOPE")
        self.assertEqual(code, 1)

    def test_empty_registry(self):
        code, out = self._run(statement_report)
        self.assertEqual(code, 0)
        self.assertIn("[WARNING]", out)


if __name__ == "__main__":
    unittest.main(verbosity=2)
