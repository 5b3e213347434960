"""Budget estimation orchestrator.

Drives one calculation through its phases:

    idle -> validating -> estimating_tax -> analyzing_budget -> complete
                   \\              \\                  \\
                    +--------------+------------------+--> errored

Every transition replaces the current OrchestratorState with a new frozen
snapshot and hands it to subscribers. Nothing outside this module mutates a
snapshot.

Overlapping calls to ``calculate`` are not guarded: each call runs its own
sequence of transitions and the latest transition wins. Callers that need
one-at-a-time behaviour should disable their trigger while ``is_loading``.
"""

from decimal import Decimal
from typing import Callable, Optional, Union

import structlog

from .exceptions import EstimationError, ValidationError
from .estimation_client import EstimationService
from .ledger import ExpenseLedger
from .models import (
    AnalysisRequest,
    EstimationRequest,
    FilingStatus,
    OrchestratorState,
    Phase,
    ValidationResult,
)
from .validation import require_valid, validate_form

logger = structlog.get_logger()

GENERIC_ERROR_MESSAGE = (
    "An error occurred during analysis. Please check your inputs and try again."
)
ESTIMATING_TAX_STATUS = "Estimating your taxes..."
ANALYZING_BUDGET_STATUS = "Analyzing your budget..."

StateListener = Callable[[OrchestratorState], None]


class BudgetOrchestrator:
    """
    Owns the form inputs, the expense ledger and the calculation lifecycle.

    The presentation layer edits inputs through ``set_inputs`` and the
    ``ledger``, triggers ``calculate``, and renders whatever snapshot it is
    handed through ``subscribe`` (or reads ``state`` directly).
    """

    def __init__(
        self,
        service: EstimationService,
        ledger: Optional[ExpenseLedger] = None,
        *,
        gross_income: str = "",
        location: str = "",
        filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    ):
        self.service = service
        self.ledger = ledger if ledger is not None else ExpenseLedger()
        self.gross_income = gross_income
        self.location = location
        self.filing_status = FilingStatus(filing_status)
        self._state = OrchestratorState()
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Inputs and derived values
    # ------------------------------------------------------------------

    def set_inputs(
        self,
        *,
        gross_income: Optional[str] = None,
        location: Optional[str] = None,
        filing_status: Optional[Union[FilingStatus, str]] = None,
    ) -> None:
        """Update any subset of the form fields."""
        if gross_income is not None:
            self.gross_income = gross_income
        if location is not None:
            self.location = location
        if filing_status is not None:
            self.filing_status = FilingStatus(filing_status)

    @property
    def validation(self) -> ValidationResult:
        return validate_form(self.gross_income, self.location, self.ledger)

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def remaining_balance(self) -> Optional[Decimal]:
        """Net income minus the ledger's current total, once net income is known."""
        if self._state.net_income is None:
            return None
        return self._state.net_income - self.ledger.compute_total()

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for every new snapshot. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: OrchestratorState) -> OrchestratorState:
        self._state = state
        logger.debug("orchestrator_transition", phase=state.phase.value)
        for listener in list(self._listeners):
            listener(state)
        return state

    def _transition(self, **changes) -> OrchestratorState:
        return self._publish(self._state.model_copy(update=changes))

    def _fail(self, message: str) -> OrchestratorState:
        return self._transition(
            phase=Phase.ERRORED,
            is_loading=False,
            loading_status="",
            show_results=False,
            net_income=None,
            total_tax=None,
            disclaimer=None,
            analysis_text=None,
            error_message=message,
        )

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    async def calculate(self) -> OrchestratorState:
        """Run validation, tax estimation and budget analysis in sequence.

        Failures of any kind inside the service calls are caught: the
        returned (and published) snapshot is either ``complete`` or
        ``errored``, with the loading indicator cleared.
        """
        self._transition(phase=Phase.VALIDATING)
        try:
            gross_income = require_valid(self.gross_income, self.location)
        except ValidationError as e:
            logger.info("calculation_rejected", field=e.field)
            return self._fail(e.message)

        location = self.location
        request = EstimationRequest(
            gross_monthly_income=gross_income,
            location=location,
            filing_status=self.filing_status,
        )

        self._transition(
            phase=Phase.ESTIMATING_TAX,
            is_loading=True,
            loading_status=ESTIMATING_TAX_STATUS,
            show_results=True,
            net_income=None,
            total_tax=None,
            analysis_text=None,
            error_message=None,
        )

        try:
            estimate = await self.service.estimate_net_income(request)

            self._transition(
                phase=Phase.ANALYZING_BUDGET,
                loading_status=ANALYZING_BUDGET_STATUS,
                net_income=estimate.net_income,
                total_tax=estimate.total_tax,
                disclaimer=estimate.disclaimer,
            )

            # Ledger may have changed while the tax call was in flight.
            total_expenses = self.ledger.compute_total()
            analysis_request = AnalysisRequest(
                gross_income=gross_income,
                net_income=estimate.net_income,
                location=location,
                valid_expenses=[entry.model_copy() for entry in self.ledger.named_entries()],
                total_expenses=total_expenses,
                remaining_balance=estimate.net_income - total_expenses,
            )
            analysis_text = await self.service.analyze_budget(analysis_request)
        except EstimationError as e:
            logger.error(
                "calculation_failed",
                phase=self._state.phase.value,
                error=str(e),
                error_type=type(e).__name__,
                details=e.details,
            )
            return self._fail(GENERIC_ERROR_MESSAGE)
        except Exception:
            logger.exception("calculation_failed_unexpectedly", phase=self._state.phase.value)
            return self._fail(GENERIC_ERROR_MESSAGE)

        logger.info("calculation_complete", net_income=str(estimate.net_income))
        return self._transition(
            phase=Phase.COMPLETE,
            is_loading=False,
            loading_status="",
            analysis_text=analysis_text,
        )
