"""
Estimation client for net income and budget analysis.

Wraps the two remote calls the budget workflow depends on:

1. ``estimate_net_income`` - structured call that must return exactly
   ``estimatedNetIncome``, ``estimatedTotalTax`` and ``disclaimer``.
2. ``analyze_budget`` - free-form call returning a short narrative.

Both calls are single round trips with no retries. Every failure surfaces as
an EstimationError (AnalysisError for the narrative call) so callers never see
SDK or parser exceptions.
"""

import json
import os
import re
from decimal import Decimal
from typing import Any, Optional, Protocol, runtime_checkable

import anthropic
import structlog
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .config import LLMConfig
from .exceptions import AnalysisError, ConfigurationError, EstimationError
from .models import AnalysisRequest, EstimationRequest, TaxEstimate
from .validation import parse_amount

logger = structlog.get_logger()


TAX_ESTIMATE_TOOL_NAME = "record_tax_estimate"

# Forced tool call; the input schema is the structured response contract.
TAX_ESTIMATE_TOOL: dict[str, Any] = {
    "name": TAX_ESTIMATE_TOOL_NAME,
    "description": "Record the estimated monthly net income and total tax.",
    "input_schema": {
        "type": "object",
        "properties": {
            "estimatedNetIncome": {
                "type": "number",
                "description": "The estimated monthly income after all taxes.",
            },
            "estimatedTotalTax": {
                "type": "number",
                "description": "The total estimated monthly tax amount.",
            },
            "disclaimer": {
                "type": "string",
                "description": "A brief disclaimer.",
            },
        },
        "required": ["estimatedNetIncome", "estimatedTotalTax", "disclaimer"],
    },
}


TAX_ESTIMATION_PROMPT = """Act as a tax calculator. Based on the user's details, estimate their monthly net income.
- Gross Monthly Income: ${gross_income}
- Location: "{location}" (Consider US federal, state, and any applicable local/city taxes)
- Tax Filing Status: "{filing_status}"

Use standard deductions for your calculation. Report the result with the {tool_name} tool: 'estimatedNetIncome' (number), 'estimatedTotalTax' (number), and a brief one-sentence 'disclaimer' stating that this is an estimate for informational purposes only and not financial advice."""


BUDGET_ANALYSIS_PROMPT = """You are a friendly and insightful financial assistant. A user has provided their monthly budget information. Give a brief, encouraging, and helpful analysis of their budget.

USER'S FINANCIAL DETAILS:
- Location: {location}
- Gross Monthly Income: ${gross_income}
- Estimated Net Monthly Income (After Tax): ${net_income}
- Monthly Expenses:
{expense_lines}
- Total Monthly Expenses: ${total_expenses}
- Remaining Balance: ${remaining_balance}

INSTRUCTIONS:
1. Tone: positive, encouraging, and non-judgmental, regardless of the remaining balance.
2. Analysis: briefly comment on their situation. Congratulate a positive balance; for a negative one, be reassuring and focus on actionable steps.
3. Tips: give one or two simple, actionable tips. The location may matter (e.g., high cost of living areas).
4. Format: 2-3 short paragraphs of plain language. No markdown headers or bold text.

Speak directly to the user."""


def format_money(value: Decimal) -> str:
    """Two-decimal rendering used inside prompts."""
    return f"{value:.2f}"


def format_expense_lines(request: AnalysisRequest) -> str:
    """One ``- name: $amount`` line per expense, amounts to two decimals.

    Amounts that do not read as numbers are passed through as typed.
    """
    lines = []
    for expense in request.valid_expenses:
        amount = parse_amount(expense.amount)
        rendered = format_money(amount) if amount is not None else expense.amount.strip()
        lines.append(f"- {expense.name}: ${rendered}")
    return "\n".join(lines) if lines else "- (none listed)"


def build_tax_prompt(request: EstimationRequest) -> str:
    return TAX_ESTIMATION_PROMPT.format(
        gross_income=format_money(request.gross_monthly_income),
        location=request.location,
        filing_status=request.filing_status.value,
        tool_name=TAX_ESTIMATE_TOOL_NAME,
    )


def build_analysis_prompt(request: AnalysisRequest) -> str:
    return BUDGET_ANALYSIS_PROMPT.format(
        location=request.location,
        gross_income=format_money(request.gross_income),
        net_income=format_money(request.net_income),
        expense_lines=format_expense_lines(request),
        total_expenses=format_money(request.total_expenses),
        remaining_balance=format_money(request.remaining_balance),
    )


class _TaxEstimatePayload(BaseModel):
    """Wire shape of the structured tax response."""

    model_config = {"extra": "ignore"}

    net_income: float = Field(alias="estimatedNetIncome", strict=True, allow_inf_nan=False)
    total_tax: float = Field(alias="estimatedTotalTax", strict=True, allow_inf_nan=False)
    disclaimer: str = Field(strict=True)


def parse_tax_payload(payload: Any) -> TaxEstimate:
    """Validate a decoded service payload into a TaxEstimate.

    Raises:
        EstimationError: If a required field is missing or has the wrong type.
    """
    if not isinstance(payload, dict):
        raise EstimationError(
            "Failed to generate tax estimation from AI.",
            operation="estimate_net_income",
            api_error=f"Expected a JSON object, got {type(payload).__name__}",
        )
    try:
        parsed = _TaxEstimatePayload.model_validate(payload)
    except PydanticValidationError as e:
        raise EstimationError(
            "Failed to generate tax estimation from AI.",
            operation="estimate_net_income",
            api_error=str(e),
        ) from e

    return TaxEstimate(
        net_income=Decimal(str(parsed.net_income)),
        total_tax=Decimal(str(parsed.total_tax)),
        disclaimer=parsed.disclaimer,
    )


def _parse_json_response(response: str) -> Optional[dict[str, Any]]:
    """Parse JSON from model text, handling code fences and surrounding prose."""
    try:
        return json.loads(response.strip())
    except json.JSONDecodeError:
        pass

    json_match = re.search(r'```(?:json)?\s*(\{.*?\})\s*```', response, re.DOTALL)
    if json_match:
        try:
            return json.loads(json_match.group(1))
        except json.JSONDecodeError:
            pass

    json_match = re.search(r'\{[^{}]*\}', response, re.DOTALL)
    if json_match:
        try:
            return json.loads(json_match.group(0))
        except json.JSONDecodeError:
            pass

    return None


def _text_of(content: list[Any]) -> str:
    return "".join(getattr(block, "text", "") for block in content if getattr(block, "type", None) == "text")


@runtime_checkable
class EstimationService(Protocol):
    """Contract for the remote estimation service.

    Any object with these two coroutines can drive the orchestrator; tests use
    in-memory stubs, production uses AnthropicEstimationClient.
    """

    async def estimate_net_income(self, request: EstimationRequest) -> TaxEstimate:
        """Estimate monthly net income and total tax.

        Raises:
            EstimationError: On transport failure or an unparseable response.
        """
        ...

    async def analyze_budget(self, request: AnalysisRequest) -> str:
        """Produce a short narrative analysis of the budget.

        Raises:
            AnalysisError: On transport failure or an empty response.
        """
        ...


class AnthropicEstimationClient:
    """
    Estimation service backed by the Anthropic Messages API.

    One async client is shared by both operations. SDK retries are disabled;
    the configured timeout is the only bound on a hanging call.
    """

    def __init__(self, config: LLMConfig, client: Optional[anthropic.AsyncAnthropic] = None):
        """
        Args:
            config: Model, sampling and timeout settings.
            client: Pre-built SDK client. When omitted one is created from
                ``config.api_key``.
        """
        self.config = config
        if client is None:
            client = anthropic.AsyncAnthropic(
                api_key=config.api_key,
                timeout=config.timeout,
                max_retries=0,
            )
        self.client = client

    @property
    def model(self) -> str:
        return self.config.model

    async def estimate_net_income(self, request: EstimationRequest) -> TaxEstimate:
        prompt = build_tax_prompt(request)
        logger.info(
            "tax_estimate_requested",
            model=self.model,
            location=request.location,
            filing_status=request.filing_status.value,
        )

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.config.tax_max_tokens,
                temperature=self.config.temperature,
                tools=[TAX_ESTIMATE_TOOL],
                tool_choice={"type": "tool", "name": TAX_ESTIMATE_TOOL_NAME},
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.error("tax_estimate_api_failed", model=self.model, error=str(e))
            raise EstimationError(
                "Failed to generate tax estimation from AI.",
                operation="estimate_net_income",
                api_error=str(e),
            ) from e

        payload: Optional[dict[str, Any]] = None
        for block in response.content:
            if getattr(block, "type", None) == "tool_use" and block.name == TAX_ESTIMATE_TOOL_NAME:
                payload = block.input
                break
        if payload is None:
            payload = _parse_json_response(_text_of(response.content))
        if payload is None:
            logger.error("tax_estimate_unparseable", model=self.model)
            raise EstimationError(
                "Failed to generate tax estimation from AI.",
                operation="estimate_net_income",
                api_error="No structured tax estimate in response",
            )

        estimate = parse_tax_payload(payload)
        logger.info(
            "tax_estimate_received",
            net_income=str(estimate.net_income),
            total_tax=str(estimate.total_tax),
        )
        return estimate

    async def analyze_budget(self, request: AnalysisRequest) -> str:
        prompt = build_analysis_prompt(request)
        logger.info(
            "budget_analysis_requested",
            model=self.model,
            expenses=len(request.valid_expenses),
        )

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.config.analysis_max_tokens,
                temperature=self.config.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.error("budget_analysis_api_failed", model=self.model, error=str(e))
            raise AnalysisError(
                "Failed to generate budget analysis from AI.",
                operation="analyze_budget",
                api_error=str(e),
            ) from e

        text = _text_of(response.content).strip()
        if not text:
            raise AnalysisError(
                "Failed to generate budget analysis from AI.",
                operation="analyze_budget",
                api_error="Empty analysis text",
            )
        return text


def create_estimation_client(config: Optional[LLMConfig] = None) -> AnthropicEstimationClient:
    """
    Build the production estimation client.

    The API key comes from the config or, failing that, ANTHROPIC_API_KEY.

    Raises:
        ConfigurationError: If no API key is available. This is a startup
            failure, not a per-call one.
    """
    config = config or LLMConfig()
    api_key = config.api_key or os.getenv("ANTHROPIC_API_KEY")
    if not api_key:
        raise ConfigurationError(
            "No Anthropic API key provided. Set BUDGET_ANALYZER_LLM_API_KEY "
            "or ANTHROPIC_API_KEY.",
            config_key="BUDGET_ANALYZER_LLM_API_KEY",
            expected="Valid Anthropic API key",
        )
    if config.api_key != api_key:
        config = config.model_copy(update={"api_key": api_key})
    return AnthropicEstimationClient(config)
