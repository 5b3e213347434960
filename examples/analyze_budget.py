#!/usr/bin/env python3
"""
Estimate Net Income and Analyze a Monthly Budget

Runs one calculation end to end against the configured estimation service
and prints every phase as it happens.

Usage:
    python examples/analyze_budget.py 5000 "Austin, TX" --expense Rent=1500 --expense Groceries=450
    python examples/analyze_budget.py 7200 "Brooklyn, NY" --filing-status "Married Filing Jointly"

Requires BUDGET_ANALYZER_LLM_API_KEY or ANTHROPIC_API_KEY.
"""

import argparse
import asyncio
import sys

from budget_analyzer import (
    BudgetOrchestrator,
    ConfigurationError,
    ExpenseLedger,
    FilingStatus,
    OrchestratorState,
    create_estimation_client,
)
from budget_analyzer.config import BudgetAnalyzerConfig
from budget_analyzer.logging_config import configure_logging


def parse_expense(value: str) -> tuple[str, str]:
    name, sep, amount = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected NAME=AMOUNT, got '{value}'")
    return name.strip(), amount.strip()


def print_state(state: OrchestratorState) -> None:
    label = state.loading_status or state.phase.value
    print(f"[{state.phase.value}] {label}")


def main():
    parser = argparse.ArgumentParser(
        description="Estimate monthly net income and get a short budget analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("gross_income", help="Gross monthly income, e.g. 5000")
    parser.add_argument("location", help="City and state, e.g. 'Austin, TX'")
    parser.add_argument(
        "--filing-status",
        choices=[status.value for status in FilingStatus],
        default=FilingStatus.SINGLE.value,
        help="Tax filing status (default: Single)",
    )
    parser.add_argument(
        "--expense",
        action="append",
        type=parse_expense,
        default=[],
        metavar="NAME=AMOUNT",
        help="Monthly expense; repeat for each line",
    )
    args = parser.parse_args()

    config = BudgetAnalyzerConfig()
    configure_logging(config.log_level)

    try:
        service = create_estimation_client(config.llm)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    ledger = ExpenseLedger(entries=[])
    for name, amount in args.expense:
        entry = ledger.add()
        ledger.update(entry.id, "name", name)
        ledger.update(entry.id, "amount", amount)

    orchestrator = BudgetOrchestrator(
        service,
        ledger,
        gross_income=args.gross_income,
        location=args.location,
        filing_status=args.filing_status,
    )
    orchestrator.subscribe(print_state)

    state = asyncio.run(orchestrator.calculate())

    if state.is_errored:
        print(f"\n{state.error_message}", file=sys.stderr)
        sys.exit(1)

    print()
    print(f"Gross monthly income:  ${args.gross_income}")
    print(f"Estimated total tax:   ${state.total_tax:,.2f}")
    print(f"Estimated net income:  ${state.net_income:,.2f}")
    print(f"Total expenses:        ${ledger.compute_total():,.2f}")
    print(f"Remaining balance:     ${orchestrator.remaining_balance:,.2f}")
    print(f"\n{state.disclaimer}\n")
    print(state.analysis_text)


if __name__ == "__main__":
    main()
