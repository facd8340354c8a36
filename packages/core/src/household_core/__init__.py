"""Household Core - Income statement calculations, insights and reporting."""

__version__ = "0.1.0"

from .calculator import StatementCalculator, compute_statement
from .config import HouseholdConfig, configure_logging
from .models import Statement, StatementInput, C2ESettings
from .quick_report import generate_quick_report
from .service import StatementService
from .storage import InMemoryStatementRepository

__all__ = [
    "StatementCalculator",
    "compute_statement",
    "HouseholdConfig",
    "configure_logging",
    "Statement",
    "StatementInput",
    "C2ESettings",
    "generate_quick_report",
    "StatementService",
    "InMemoryStatementRepository",
]
