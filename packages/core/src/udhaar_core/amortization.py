"""Fixed-payment amortization for fully amortizing monthly loans.

One calculator backs every place a repayment figure is shown: the loan
application estimator, the external-loan calculator and the repayment
schedule of an approved loan.

The installment follows the standard annuity formula:

    payment = P * (r * (1 + r)^n) / ((1 + r)^n - 1)

where ``P`` is the principal, ``r`` the monthly rate and ``n`` the number
of payments. Terms with a non-positive principal, rate or term yield a
zero summary and an empty schedule, as do rates too small to compound
at Decimal precision. Zero-interest loans are deliberately
not amortized.

All arithmetic is done in Decimal at full context precision. Rounding
happens only when amounts are formatted for display.
"""

from decimal import Decimal

import structlog

from .models import AmortizationRow, LoanTerms, RepaymentSummary

logger = structlog.get_logger()

# Residual left on the final period by finite-precision division
_SETTLEMENT_TOLERANCE = Decimal("1e-9")


class AmortizationCalculator:
    """
    Compute installment, totals and schedule for fixed loan terms.

    The calculator is stateless; every call recomputes from the given terms,
    so it is safe to call on every slider movement.
    """

    @staticmethod
    def _growth_factor(terms: LoanTerms) -> Decimal:
        return (1 + terms.monthly_rate) ** terms.term_months

    @classmethod
    def is_amortizable(cls, terms: LoanTerms) -> bool:
        """Whether the annuity formula applies to these terms."""
        if terms.principal <= 0 or terms.monthly_rate <= 0 or terms.term_months <= 0:
            return False
        # Rates below the context precision compound to exactly 1
        return cls._growth_factor(terms) > 1

    def monthly_payment(self, terms: LoanTerms) -> Decimal:
        """Equal monthly installment, or zero when the terms cannot be amortized."""
        if not self.is_amortizable(terms):
            return Decimal("0")

        rate = terms.monthly_rate
        factor = self._growth_factor(terms)
        return terms.principal * (rate * factor) / (factor - 1)

    def compute_summary(self, terms: LoanTerms) -> RepaymentSummary:
        """
        Calculate monthly payment, total repayment and total interest.

        Args:
            terms: Loan terms; boundary values are accepted

        Returns:
            RepaymentSummary, all zero when principal, rate or term is not positive
        """
        if not self.is_amortizable(terms):
            logger.debug(
                "repayment_summary_degenerate",
                principal=str(terms.principal),
                rate=str(terms.annual_interest_rate_percent),
                term_months=terms.term_months,
            )
            return RepaymentSummary.zero()

        monthly = self.monthly_payment(terms)
        total = monthly * terms.term_months
        interest = total - terms.principal

        logger.debug(
            "repayment_summary_computed",
            principal=str(terms.principal),
            rate=str(terms.annual_interest_rate_percent),
            term_months=terms.term_months,
            monthly_payment=str(monthly),
        )
        return RepaymentSummary(
            monthly_payment=monthly,
            total_interest=interest,
            total_repayment=total,
        )

    def compute_schedule(self, terms: LoanTerms) -> list[AmortizationRow]:
        """
        Build the month-by-month amortization schedule.

        Each period charges interest on the outstanding balance and applies
        the rest of the installment to principal. The final balance is
        settled to exactly zero.

        Args:
            terms: Loan terms; boundary values are accepted

        Returns:
            One row per month, or an empty list when the terms cannot be amortized
        """
        if not self.is_amortizable(terms):
            return []

        rate = terms.monthly_rate
        payment = self.monthly_payment(terms)
        balance = terms.principal
        schedule: list[AmortizationRow] = []

        for month in range(1, terms.term_months + 1):
            interest = balance * rate
            principal = payment - interest
            balance -= principal

            if balance < 0:
                balance = Decimal("0")
            elif month == terms.term_months and balance < _SETTLEMENT_TOLERANCE:
                balance = Decimal("0")

            schedule.append(
                AmortizationRow(
                    month=month,
                    payment=payment,
                    principal_portion=principal,
                    interest_portion=interest,
                    remaining_balance=balance,
                )
            )

        logger.debug(
            "repayment_schedule_computed",
            principal=str(terms.principal),
            periods=len(schedule),
        )
        return schedule


_default_calculator = AmortizationCalculator()


def compute_summary(terms: LoanTerms) -> RepaymentSummary:
    """Module-level shortcut for ``AmortizationCalculator().compute_summary``."""
    return _default_calculator.compute_summary(terms)


def compute_schedule(terms: LoanTerms) -> list[AmortizationRow]:
    """Module-level shortcut for ``AmortizationCalculator().compute_schedule``."""
    return _default_calculator.compute_schedule(terms)


__all__ = [
    "AmortizationCalculator",
    "compute_summary",
    "compute_schedule",
]
