"""Exceptions raised by the ledger engine.

Every one of these is a precondition failure: it is raised before any month or
transaction is modified, so callers can surface it and retry safely.
"""


class LedgerError(Exception):
    """Base class for ledger precondition failures."""


class CategoryNotFoundError(LedgerError):
    """A category item or group referenced by name or id does not exist."""


class DuplicateCategoryError(LedgerError):
    """A category item or group name is already in use."""


class UnsafeDeletionError(LedgerError):
    """Deleting would lose money or orphan transactions."""


class ProtectedCategoryError(LedgerError):
    """The category is system-managed (credit card payments)."""
