"""
Exceptions raised at the file/registry level.

Row-level data problems never raise; they degrade to 0 / unparseable and the
row is either kept or silently dropped.
"""


class LedgerImportError(Exception):
    """Raised when a registry export cannot be imported as a whole."""

    USER_MESSAGE = "Import Error: Please verify the CSV format and column headers."

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class RegistryError(Exception):
    """Raised when the persisted registry JSON is unreadable or malformed."""
    pass
