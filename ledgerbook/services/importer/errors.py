"""
Import Errors

Every failure of the import pipeline is one of these. All are terminal
for the current import; none is retried.
"""

from typing import Optional


class LedgerImportError(Exception):
    """Base exception for import errors."""
    pass


class UnsupportedFileType(LedgerImportError):
    """File extension is neither csv nor xls."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported file type: '{extension}' (expected csv or xls)")


class EmptyFile(LedgerImportError):
    """No data rows to import."""

    def __init__(self, message: str = "File contains no rows to import"):
        super().__init__(message)


class InvalidFormat(LedgerImportError):
    """A field value could not be parsed, or the header is missing a column."""

    def __init__(self, field: str, raw_value: str, line_number: Optional[int] = None):
        self.field = field
        self.raw_value = raw_value
        self.line_number = line_number
        location = f" at line {line_number}" if line_number is not None else ""
        super().__init__(f"Invalid {field}{location}: '{raw_value}'")


class XmlParseFailure(LedgerImportError):
    """The Excel XML document is malformed."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Could not parse Excel XML: {detail}")
