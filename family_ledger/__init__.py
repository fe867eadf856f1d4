"""Family bookkeeping backend: ledgers, records, budgets and reports over SQLite."""

__version__ = "1.0.0"
