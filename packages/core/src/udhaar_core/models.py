"""Core data models for loan repayment estimates and application forms.

Loan terms and everything derived from them are immutable pydantic
values. Derived values (summaries, schedule rows, form progress) are
recomputed from scratch on every input change and never mutated in place.
Amounts are plain Decimals; display formatting lives in ``formatting``.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator


# =============================================================================
# ENUMERATIONS
# =============================================================================

class SchemeType(str, Enum):
    """How a loan scheme is processed."""
    INTERNAL = "internal"  # Direct loan, processed within the app
    GOVERNMENT = "government"  # Redirects to an external portal


class FormMode(str, Enum):
    """Validation mode of the application form, derived from the scheme type."""
    DIRECT = "direct"
    GOVERNMENT = "government"


# =============================================================================
# REPAYMENT MODELS
# =============================================================================

class LoanTerms(BaseModel):
    """Fixed-rate, fixed-term loan terms for a single calculation.

    No positivity constraints are enforced here: the calculator is fed
    directly from sliders and text boxes and degrades to a zero summary
    for boundary values instead of rejecting them.
    """

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "principal": "100000",
                    "annual_interest_rate_percent": "9.75",
                    "term_months": 12,
                }
            ]
        },
    }

    principal: Decimal = Field(description="Amount borrowed")
    annual_interest_rate_percent: Decimal = Field(
        description="Nominal annual interest rate, in percent (9.75 means 9.75%)"
    )
    term_months: int = Field(description="Number of monthly installments")

    @field_validator("principal", "annual_interest_rate_percent", mode="before")
    @classmethod
    def coerce_to_decimal(cls, v):
        """Coerce floats through their string form to avoid binary artifacts."""
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @computed_field
    @property
    def monthly_rate(self) -> Decimal:
        """Periodic (monthly) interest rate as a fraction."""
        return self.annual_interest_rate_percent / Decimal(100) / Decimal(12)

    @classmethod
    def for_scheme(cls, principal, scheme: "Scheme", term_months: int) -> "LoanTerms":
        """Build terms using the scheme's interest rate."""
        return cls(
            principal=principal,
            annual_interest_rate_percent=scheme.interest_rate,
            term_months=term_months,
        )


class RepaymentSummary(BaseModel):
    """Monthly installment and totals for a set of loan terms.

    Invariants: ``total_repayment == monthly_payment * term_months`` and
    ``total_interest == total_repayment - principal``.
    """

    model_config = {"frozen": True}

    monthly_payment: Decimal = Field(default=Decimal("0"))
    total_interest: Decimal = Field(default=Decimal("0"))
    total_repayment: Decimal = Field(default=Decimal("0"))

    @classmethod
    def zero(cls) -> "RepaymentSummary":
        """Summary returned for terms that cannot be amortized."""
        return cls()

    @property
    def is_zero(self) -> bool:
        return (
            self.monthly_payment == 0
            and self.total_interest == 0
            and self.total_repayment == 0
        )


class AmortizationRow(BaseModel):
    """One period of an amortization schedule."""

    model_config = {"frozen": True}

    month: int = Field(ge=1, description="1-based period index")
    payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal = Field(ge=0)


# =============================================================================
# SCHEMES AND UPLOADS
# =============================================================================

class Scheme(BaseModel):
    """A named loan product with its own rate and ceiling."""

    model_config = {"frozen": True}

    id: str
    name: str
    description: str = ""
    link: str = "#"
    interest_rate: Decimal = Field(ge=0, description="Annual interest rate in percent")
    max_loan_amount: Decimal = Field(gt=0)
    type: SchemeType = SchemeType.INTERNAL

    @property
    def is_government(self) -> bool:
        """Government schemes redirect to an external portal."""
        return self.type == SchemeType.GOVERNMENT


class FileReference(BaseModel):
    """Metadata of a file picked by the user. The content itself is never held."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    content_type: str
    size_bytes: int = Field(ge=0)


# =============================================================================
# FORM MODELS
# =============================================================================

class FormContext(BaseModel):
    """Upstream selections that decide which fields apply and how they validate."""

    model_config = {"frozen": True}

    scheme: Optional[Scheme] = None
    loan_purpose: str = ""

    @property
    def mode(self) -> FormMode:
        if self.scheme is not None and self.scheme.is_government:
            return FormMode.GOVERNMENT
        return FormMode.DIRECT

    @property
    def is_government(self) -> bool:
        return self.mode == FormMode.GOVERNMENT


class FormProgress(BaseModel):
    """Completion state of the application form."""

    model_config = {"frozen": True}

    completion_percent: int = Field(ge=0, le=100)
    field_errors: dict[str, str] = Field(
        default_factory=dict,
        description="Error message per invalid required field",
    )

    @computed_field
    @property
    def is_submittable(self) -> bool:
        return self.completion_percent == 100


class ValidationOutcome(BaseModel):
    """Result of re-validating every required field before submission."""

    model_config = {"frozen": True}

    errors: dict[str, str] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


__all__ = [
    "SchemeType",
    "FormMode",
    "LoanTerms",
    "RepaymentSummary",
    "AmortizationRow",
    "Scheme",
    "FileReference",
    "FormContext",
    "FormProgress",
    "ValidationOutcome",
]
