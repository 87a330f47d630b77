"""
Budget Ledger - Source Package

A personal monthly budget ledger: income and expense entries recorded
per calendar month, with derived totals and a persisted snapshot of the
full history.

DESIGN PRINCIPLES:
1. The in-memory ledger is the source of truth
2. Reject bad input loudly, never repair it silently
3. Every mutation is written through to storage
4. Every step must be auditable
5. Storage medium is swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Ledger Team"
