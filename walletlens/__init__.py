"""
WalletLens - Personal Finance Ledger

Records income and expenses, tracks bill reminders with local alerts,
and monitors a monthly budget.

DESIGN PRINCIPLES:
1. The ledger is the single source of truth; totals are always derived
2. Every mutation is persisted immediately, in full
3. No failure is fatal: failures are logged and state falls back
4. Collaborators (storage, alerts, widget) are injected, never global
"""

__version__ = "1.0.0"
__author__ = "WalletLens Team"
