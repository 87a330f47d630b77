"""Ledger store package."""

from budget_ledger.ledger.store import LedgerStore, Notifier, PersistenceNotice

__all__ = ["LedgerStore", "Notifier", "PersistenceNotice"]
