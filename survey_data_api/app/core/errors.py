"""
Error types raised by the record gateway.

The taxonomy is flat: anything that goes wrong inside the
store surfaces as ``StoreFailure``, and out‑of‑domain field values are
rejected before any write with ``RecordValidationError``.
"""

from typing import Any, Dict, List


class StoreFailure(Exception):
    """The underlying record store failed while performing ``operation``."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Record store failure during {operation}")
        self.operation = operation


class RecordValidationError(ValueError):
    """One or more records carry missing or out‑of‑domain field values."""

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        fields = ", ".join(sorted({str(err.get("field")) for err in errors}))
        super().__init__(f"Invalid record fields: {fields}")
        self.errors = errors
