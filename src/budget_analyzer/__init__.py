"""Budget Analyzer - AI-assisted net income estimation and budget analysis."""

__version__ = "0.1.0"

from .estimation_client import AnthropicEstimationClient, EstimationService, create_estimation_client
from .exceptions import (
    AnalysisError,
    BudgetAnalyzerError,
    ConfigurationError,
    EstimationError,
    ValidationError,
)
from .ledger import ExpenseLedger
from .models import (
    AnalysisRequest,
    EstimationRequest,
    ExpenseEntry,
    FilingStatus,
    OrchestratorState,
    Phase,
    TaxEstimate,
    ValidationResult,
)
from .orchestrator import BudgetOrchestrator
from .validation import is_valid, validate_form

__all__ = [
    "AnthropicEstimationClient",
    "EstimationService",
    "create_estimation_client",
    "AnalysisError",
    "BudgetAnalyzerError",
    "ConfigurationError",
    "EstimationError",
    "ValidationError",
    "ExpenseLedger",
    "AnalysisRequest",
    "EstimationRequest",
    "ExpenseEntry",
    "FilingStatus",
    "OrchestratorState",
    "Phase",
    "TaxEstimate",
    "ValidationResult",
    "BudgetOrchestrator",
    "is_valid",
    "validate_form",
]
