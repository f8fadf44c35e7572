"""Activity logging package."""

from walletlens.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
