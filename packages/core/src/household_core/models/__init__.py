"""Data models for household-core.

This package provides:
- Typed form input sections and cost-to-earn settings (inputs.py)
- The income statement document and its parts (statement.py)
- Calculation audit entries (audit.py)
"""

from household_core.models.inputs import (
    SectionInput,
    IncomeInput,
    PreTaxDeductionsInput,
    EssentialNeedsInput,
    CostToEarnInput,
    SavingsInvestmentsInput,
    DiscretionaryExpensesInput,
    AnnualExpensesInput,
    C2ESetting,
    C2ESettings,
    StatementInput,
)

from household_core.models.statement import (
    MonetaryAmount,
    IncomeTotals,
    PreTaxDeductionTotals,
    CostToEarnTotals,
    EssentialNeedsTotals,
    SavingsInvestmentTotals,
    DiscretionaryExpenseTotals,
    AnnualExpenseTotals,
    RecommendationStatus,
    Recommendation,
    Recommendations,
    ValueChainOpportunity,
    Statement,
)

from household_core.models.audit import AuditEntry

__all__ = [
    # Inputs
    "SectionInput",
    "IncomeInput",
    "PreTaxDeductionsInput",
    "EssentialNeedsInput",
    "CostToEarnInput",
    "SavingsInvestmentsInput",
    "DiscretionaryExpensesInput",
    "AnnualExpensesInput",
    "C2ESetting",
    "C2ESettings",
    "StatementInput",
    # Statement
    "MonetaryAmount",
    "IncomeTotals",
    "PreTaxDeductionTotals",
    "CostToEarnTotals",
    "EssentialNeedsTotals",
    "SavingsInvestmentTotals",
    "DiscretionaryExpenseTotals",
    "AnnualExpenseTotals",
    "RecommendationStatus",
    "Recommendation",
    "Recommendations",
    "ValueChainOpportunity",
    "Statement",
    # Audit
    "AuditEntry",
]
