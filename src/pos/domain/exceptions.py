"""Domain-level exceptions.

Business rule violations are subclasses of DomainException so the CLI
layer can catch them uniformly and display user-friendly messages.

Failures of the Inventory Store itself (unreachable, aborted transaction)
are StoreError subclasses.  They are *not* domain exceptions: they carry
no business meaning and are safe to retry.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(ValidationError):
    """A cart line asks for more units than are on hand."""

    def __init__(
        self,
        product_id: int,
        product_name: str,
        requested: int,
        available: int,
    ) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name} "
            f"(requested {requested}, only {available} left)"
        )


# ---------------------------------------------------------------------------
# Store boundary
# ---------------------------------------------------------------------------


class StoreError(Exception):
    """Base class for Inventory Store infrastructure failures."""


class StoreUnavailableError(StoreError):
    """The store could not be reached or its data could not be read."""


class TransactionConflictError(StoreError):
    """A concurrent writer committed first; the transaction must re-run."""


class TransactionAbortedError(StoreError):
    """The transaction gave up without committing anything."""
