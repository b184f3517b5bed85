"""
Domain errors surfaced to the UI (toast/snackbar).

Every service operation that raises one of these leaves the persisted
collections exactly as they were before the call.
"""
from __future__ import annotations


class DomainError(Exception):
    """Domain-level error the controller/UI can surface directly."""
    pass


class ValidationError(DomainError):
    """A single field failed validation."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class InsufficientStock(DomainError):
    def __init__(self, product_id: str, requested: int, available: int, product_name: str | None = None):
        self.product_id = product_id
        self.requested = int(requested)
        self.available = int(available)
        self.product_name = product_name
        label = product_name or product_id
        super().__init__(
            f"Insufficient stock for {label}: requested {self.requested}, "
            f"available {self.available}."
        )

    @property
    def shortfall(self) -> int:
        return max(0, self.requested - self.available)


class MissingClientForCredit(DomainError):
    def __init__(self):
        super().__init__("A client must be selected for sales on credit.")


class EmptyCart(DomainError):
    def __init__(self, what: str = "sale"):
        super().__init__(f"Add at least one product before finishing the {what}.")


class RecordNotFound(DomainError):
    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"Record {record_id!r} not found in {collection}.")


class ReceivableAlreadyPaid(DomainError):
    def __init__(self, receivable_id: str):
        self.receivable_id = receivable_id
        super().__init__(
            f"Receivable {receivable_id!r} is already paid; the sale can no longer be deleted."
        )


class MalformedImportFile(DomainError):
    pass


__all__ = [
    "DomainError",
    "ValidationError",
    "InsufficientStock",
    "MissingClientForCredit",
    "EmptyCart",
    "RecordNotFound",
    "ReceivableAlreadyPaid",
    "MalformedImportFile",
]
