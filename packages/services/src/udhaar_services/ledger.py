"""In-memory session ledgers.

Nothing is persisted: a ledger lives as long as the user's session.

- ``LoanApplicationLedger`` keeps submitted applications and produces the
  repayment schedule of approved ones.
- ``ExternalLoanTracker`` keeps loans the user holds with other lenders and
  summarizes their repayments with the shared calculator.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from udhaar_core.amortization import AmortizationCalculator
from udhaar_core.exceptions import ValidationError
from udhaar_core.formatting import format_rupees
from udhaar_core.models import AmortizationRow, RepaymentSummary

from .interfaces.types import ApplicationStatus, ExternalLoan, LoanApplicationRecord

logger = structlog.get_logger()

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


class LoanApplicationLedger:
    """Applications submitted during the session, newest first."""

    def __init__(self, calculator: Optional[AmortizationCalculator] = None):
        self._records: list[LoanApplicationRecord] = []
        self.calculator = calculator or AmortizationCalculator()

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: LoanApplicationRecord) -> LoanApplicationRecord:
        self._records.insert(0, record)
        logger.info("application_recorded", application_id=record.id, status=record.status.value)
        return record

    def get(self, application_id: str) -> Optional[LoanApplicationRecord]:
        return next((r for r in self._records if r.id == application_id), None)

    def records(self) -> list[LoanApplicationRecord]:
        return list(self._records)

    def latest(self) -> Optional[LoanApplicationRecord]:
        return self._records[0] if self._records else None

    def clear(self) -> None:
        """Forget every application, e.g. on sign-out."""
        self._records.clear()

    def update_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        *,
        loan_balance: Optional[Decimal] = None,
        next_payment_date: Optional[date] = None,
    ) -> LoanApplicationRecord:
        """Replace a record with a copy carrying the new status.

        Balance and next payment date are only changed when given.

        Raises:
            KeyError: If no application has that id
        """
        changes: dict = {"status": status}
        if loan_balance is not None:
            changes["loan_balance"] = loan_balance
        if next_payment_date is not None:
            changes["next_payment_date"] = next_payment_date

        for index, record in enumerate(self._records):
            if record.id == application_id:
                updated = record.model_copy(update=changes)
                self._records[index] = updated
                logger.info(
                    "application_status_changed",
                    application_id=application_id,
                    old_status=record.status.value,
                    new_status=status.value,
                )
                return updated
        raise KeyError(application_id)

    def repayment_schedule(self, record: LoanApplicationRecord) -> list[AmortizationRow]:
        """Schedule of an approved loan. Other statuses have no schedule."""
        if not record.is_approved or not record.loan_term:
            return []
        return self.calculator.compute_schedule(record.terms)

    def payment_reminder(self) -> Optional[str]:
        """Reminder for the first approved loan with a scheduled next payment."""
        record = next(
            (r for r in self._records if r.is_approved and r.next_payment_date),
            None,
        )
        if record is None:
            return None
        installment = self.calculator.compute_summary(record.terms).monthly_payment
        due = record.next_payment_date
        return (
            f"Your next payment of {format_rupees(installment)} is due on "
            f"{due.day} {MONTH_NAMES[due.month - 1]}."
        )


class ExternalLoanTracker:
    """Loans held with other lenders, with repayment figures for each."""

    def __init__(self, calculator: Optional[AmortizationCalculator] = None):
        self._loans: list[ExternalLoan] = []
        self.calculator = calculator or AmortizationCalculator()

    def __len__(self) -> int:
        return len(self._loans)

    def add(
        self,
        lender_name: str,
        loan_amount,
        interest_rate,
        loan_term,
        start_date: Optional[date],
    ) -> ExternalLoan:
        """
        Track a new external loan.

        Raises:
            ValidationError: If any field is missing or out of range
        """
        if any(_is_blank(v) for v in (lender_name, loan_amount, interest_rate, loan_term, start_date)):
            raise ValidationError("Please fill out all fields.", constraint="all fields required")

        try:
            loan = ExternalLoan(
                lender_name=lender_name,
                loan_amount=loan_amount,
                interest_rate=interest_rate,
                loan_term=loan_term,
                start_date=start_date,
            )
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else None
            raise ValidationError(
                f"Invalid external loan: {first['msg']}",
                field=field,
                details={"errors": e.errors(include_url=False)},
            ) from e

        self._loans.insert(0, loan)
        logger.info(
            "external_loan_added",
            loan_id=loan.id,
            lender=loan.lender_name,
            amount=str(loan.loan_amount),
        )
        return loan

    def loans(self) -> list[ExternalLoan]:
        return list(self._loans)

    def remove(self, loan_id: str) -> bool:
        before = len(self._loans)
        self._loans = [loan for loan in self._loans if loan.id != loan_id]
        return len(self._loans) < before

    def summary_for(self, loan: ExternalLoan) -> RepaymentSummary:
        return self.calculator.compute_summary(loan.terms)

    def schedule_for(self, loan: ExternalLoan) -> list[AmortizationRow]:
        return self.calculator.compute_schedule(loan.terms)

    def total_monthly_outflow(self) -> Decimal:
        """Sum of the monthly installments across all tracked loans."""
        return sum(
            (self.summary_for(loan).monthly_payment for loan in self._loans),
            Decimal("0"),
        )

    def total_outstanding_principal(self) -> Decimal:
        return sum((loan.loan_amount for loan in self._loans), Decimal("0"))


__all__ = ["LoanApplicationLedger", "ExternalLoanTracker"]
