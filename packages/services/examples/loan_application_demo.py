#!/usr/bin/env python3
"""
Loan Application Demonstration

This script walks through the applicant's journey:
1. Estimate repayments for each scheme
2. Fill in the application form and watch completion
3. Submit to the mock backend and print the repayment schedule

Run: python packages/services/examples/loan_application_demo.py
"""

import asyncio
from datetime import date
from decimal import Decimal

from udhaar_core import (
    AmortizationCalculator,
    ApplicationFormEngine,
    FileReference,
    LoanTerms,
    format_rupees,
)
from udhaar_core.schemes import DEFAULT_SCHEMES, get_scheme
from udhaar_services import (
    ApplicationSubmitter,
    LoanApplicationLedger,
    MockSubmissionBackend,
    SubmissionConfig,
)
from udhaar_services.interfaces import ApplicationStatus
from udhaar_services.logging_config import configure_logging


def sample_values() -> dict:
    """A complete QuickLoan application."""
    return {
        "full_name": "Asha Devi",
        "business_name": "Asha Tailoring",
        "address": "12 MG Road, Pune",
        "government_id_type": "Aadhar Card",
        "government_id_proof": FileReference(
            name="aadhar.pdf", content_type="application/pdf", size_bytes=240_000
        ),
        "loan_amount": "40000",
        "loan_purpose": "Purchase Equipment",
        "scheme": "s1",
        "account_holder_name": "Asha Devi",
        "bank_name": "State Bank of India",
        "account_number": "123456789012",
        "ifsc_code": "SBIN0123456",
        "bank_proof": FileReference(
            name="passbook.png", content_type="image/png", size_bytes=310_000
        ),
    }


async def main():
    configure_logging("WARNING")
    calculator = AmortizationCalculator()
    engine = ApplicationFormEngine()

    print("=" * 70)
    print("UDHAAR SETU - Loan Application Demo")
    print("=" * 70)
    print()

    # Step 1: Estimates
    print("Step 1: Estimating ₹1,00,000 over 12 months...")
    for scheme in DEFAULT_SCHEMES:
        summary = calculator.compute_summary(LoanTerms.for_scheme(Decimal("100000"), scheme, 12))
        print(f"  - {scheme.name} ({scheme.interest_rate}%)")
        print(f"      Monthly: {format_rupees(summary.monthly_payment)}")
        print(f"      Interest: {format_rupees(summary.total_interest)}")
    print()

    # Step 2: Form completion
    print("Step 2: Filling in the application form...")
    scheme = get_scheme("s1")
    values = {}
    for field, value in sample_values().items():
        values[field] = value
        progress = engine.compute_progress(values, engine.context_for(values, scheme))
        print(f"  - {field:<22} {progress.completion_percent:>3}%")
    print()

    # Step 3: Submission
    print("Step 3: Submitting...")
    ledger = LoanApplicationLedger(calculator)
    submitter = ApplicationSubmitter(
        MockSubmissionBackend(SubmissionConfig(simulated_delay_seconds=0)),
        ledger,
        engine,
    )
    outcome = await submitter.submit(values, scheme, 12)
    if not outcome.succeeded:
        print(f"  - Failed: {outcome.error or outcome.validation.errors}")
        return
    print(f"  - Application {outcome.record.id} is {outcome.record.status.value}")

    record = ledger.update_status(
        outcome.record.id,
        ApplicationStatus.APPROVED,
        loan_balance=outcome.record.loan_amount,
        next_payment_date=date(2026, 11, 5),
    )
    print(f"  - {ledger.payment_reminder()}")
    print()

    print(f"{'Month':>5}  {'Payment':>12}  {'Principal':>12}  {'Interest':>10}  {'Balance':>12}")
    for row in ledger.repayment_schedule(record):
        print(
            f"{row.month:>5}  {format_rupees(row.payment):>12}  "
            f"{format_rupees(row.principal_portion):>12}  "
            f"{format_rupees(row.interest_portion):>10}  "
            f"{format_rupees(row.remaining_balance):>12}"
        )

    print()
    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    asyncio.run(main())
