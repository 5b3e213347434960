"""Data contracts for the budget estimation workflow.

The models follow the order in which data flows through a calculation:

1. Form input (FilingStatus, ExpenseEntry, ValidationResult)
2. Tax stage (EstimationRequest -> TaxEstimate)
3. Analysis stage (AnalysisRequest -> narrative text)
4. Lifecycle (Phase, OrchestratorState)

Money is carried as Decimal. Expense amounts stay as the raw strings the user
typed so that half-typed values remain visible in the ledger.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


# =============================================================================
# ENUMERATIONS
# =============================================================================


class FilingStatus(str, Enum):
    """Tax filing statuses offered on the budget form."""

    SINGLE = "Single"
    MARRIED_FILING_JOINTLY = "Married Filing Jointly"
    MARRIED_FILING_SEPARATELY = "Married Filing Separately"
    HEAD_OF_HOUSEHOLD = "Head of Household"


class Phase(str, Enum):
    """Lifecycle phases of a budget calculation."""

    IDLE = "idle"
    VALIDATING = "validating"
    ESTIMATING_TAX = "estimating_tax"
    ANALYZING_BUDGET = "analyzing_budget"
    COMPLETE = "complete"
    ERRORED = "errored"


# =============================================================================
# FORM INPUT
# =============================================================================


def _new_entry_id() -> str:
    return uuid4().hex


class ExpenseEntry(BaseModel):
    """A single monthly expense line as entered by the user."""

    id: str = Field(default_factory=_new_entry_id)
    name: str = Field(default="", description="Expense label, e.g. 'Groceries'")
    amount: str = Field(default="", description="Raw amount text as typed")


class ValidationResult(BaseModel):
    """Derived view of the form: expense total and submit readiness."""

    total_expenses: Decimal = Field(default=Decimal("0"))
    is_form_valid: bool = False


# =============================================================================
# TAX STAGE
# =============================================================================


class EstimationRequest(BaseModel):
    """Input for the net income estimation call."""

    gross_monthly_income: Decimal = Field(gt=0)
    location: str = Field(min_length=1)
    filing_status: FilingStatus = FilingStatus.SINGLE


class TaxEstimate(BaseModel):
    """Net income estimate returned by the estimation service.

    Values are taken as reported; no range or sign checks are applied.
    """

    net_income: Decimal
    total_tax: Decimal
    disclaimer: str


# =============================================================================
# ANALYSIS STAGE
# =============================================================================


class AnalysisRequest(BaseModel):
    """Full monthly picture sent for narrative analysis."""

    gross_income: Decimal
    net_income: Decimal
    location: str
    valid_expenses: list[ExpenseEntry] = Field(default_factory=list)
    total_expenses: Decimal
    remaining_balance: Decimal


# =============================================================================
# LIFECYCLE
# =============================================================================


class OrchestratorState(BaseModel):
    """Immutable snapshot of a calculation, published on every transition.

    The presentation layer reads this snapshot only; it never mutates it.
    ``show_results`` turns on as soon as the tax stage starts so a pending
    view can render before data arrives.
    """

    model_config = {"frozen": True}

    phase: Phase = Phase.IDLE
    is_loading: bool = False
    loading_status: str = ""
    show_results: bool = False
    net_income: Optional[Decimal] = None
    total_tax: Optional[Decimal] = None
    disclaimer: Optional[str] = None
    analysis_text: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def error(self) -> Optional[str]:
        """Alias for ``error_message`` used by presentation adapters."""
        return self.error_message

    @property
    def is_complete(self) -> bool:
        return self.phase == Phase.COMPLETE

    @property
    def is_errored(self) -> bool:
        return self.phase == Phase.ERRORED


__all__ = [
    "FilingStatus",
    "Phase",
    "ExpenseEntry",
    "ValidationResult",
    "EstimationRequest",
    "TaxEstimate",
    "AnalysisRequest",
    "OrchestratorState",
]
