"""SQLAlchemy-backed repository implementations."""

from .ledger_repo_sql import DEFAULT_CONFIG, SqlOrderLedger

__all__ = ["DEFAULT_CONFIG", "SqlOrderLedger"]
