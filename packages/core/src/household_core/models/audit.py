"""Audit trail models for statement calculations.

Every figure the calculator derives is recorded as a step so a statement
can be explained line by line ("net revenue = 5000.00 - 800.00").
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class AuditEntry(BaseModel):
    """One recorded calculation step.

    Attributes:
        step: Machine-readable step name (e.g. "net_revenue")
        input_value: The operands, rendered as text
        output_value: The result, rendered as text
        source: Where the rule comes from (user input, 50/30/20 rule, ...)
        notes: Optional free-form context
        timestamp: When the step was recorded (UTC)
    """
    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utc_now)

    def to_log_line(self) -> str:
        """Render as a single human-readable line."""
        line = f"{self.step}: {self.input_value} -> {self.output_value} [{self.source}]"
        if self.notes:
            line += f" ({self.notes})"
        return line
