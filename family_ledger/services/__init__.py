"""Service package exports with lazy loading."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS = {
    "BackupService": "family_ledger.services.backup_service",
    "BudgetService": "family_ledger.services.budget_service",
    "CategoryCatalog": "family_ledger.services.category_service",
    "LedgerService": "family_ledger.services.ledger_service",
    "MemberService": "family_ledger.services.member_service",
    "RecordService": "family_ledger.services.record_service",
    "ReportService": "family_ledger.services.report_service",
    "SqlService": "family_ledger.services.common",
}

__all__ = sorted(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(_EXPORTS[name])
    return getattr(module, name)
