"""Shared fixtures for Budget Analyzer tests."""

from decimal import Decimal
from typing import Callable, Optional

import pytest

from budget_analyzer import (
    AnalysisRequest,
    EstimationRequest,
    ExpenseEntry,
    ExpenseLedger,
    TaxEstimate,
)


class StubEstimationService:
    """In-memory estimation service recording every request it receives."""

    def __init__(
        self,
        estimate: Optional[TaxEstimate] = None,
        analysis: str = "You have a healthy surplus this month.",
        tax_error: Optional[Exception] = None,
        analysis_error: Optional[Exception] = None,
        on_tax: Optional[Callable[[EstimationRequest], None]] = None,
    ):
        self.estimate = estimate or TaxEstimate(
            net_income=Decimal("3900.00"),
            total_tax=Decimal("1100.00"),
            disclaimer="This is an estimate for informational purposes only.",
        )
        self.analysis = analysis
        self.tax_error = tax_error
        self.analysis_error = analysis_error
        self.on_tax = on_tax
        self.tax_requests: list[EstimationRequest] = []
        self.analysis_requests: list[AnalysisRequest] = []

    async def estimate_net_income(self, request: EstimationRequest) -> TaxEstimate:
        self.tax_requests.append(request)
        if self.on_tax:
            self.on_tax(request)
        if self.tax_error:
            raise self.tax_error
        return self.estimate

    async def analyze_budget(self, request: AnalysisRequest) -> str:
        self.analysis_requests.append(request)
        if self.analysis_error:
            raise self.analysis_error
        return self.analysis


@pytest.fixture
def stub_service() -> StubEstimationService:
    return StubEstimationService()


@pytest.fixture
def austin_ledger() -> ExpenseLedger:
    """Ledger with one valid and one unnamed expense."""
    return ExpenseLedger(
        entries=[
            ExpenseEntry(name="Rent", amount="1500"),
            ExpenseEntry(name="", amount="200"),
        ]
    )


@pytest.fixture
def service_factory() -> type[StubEstimationService]:
    """The stub class itself, for tests that configure failures."""
    return StubEstimationService
