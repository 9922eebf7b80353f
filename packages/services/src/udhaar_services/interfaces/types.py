"""Record types held by the session: submitted applications and external loans.

1. LoanApplicationDraft - a validated form, ready for the submission backend
2. LoanApplicationRecord - a draft accepted by the backend and kept in the ledger
3. ExternalLoan - a loan from another lender tracked by the user
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field, field_validator

from udhaar_core.models import LoanTerms


# =============================================================================
# ENUMERATIONS
# =============================================================================


class ApplicationStatus(str, Enum):
    """Lifecycle status of a loan application."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    NOT_APPLIED = "Not Applied"


# =============================================================================
# APPLICATIONS
# =============================================================================


class LoanApplicationDraft(BaseModel):
    """A complete application as sent to the submission backend.

    Proofs are carried by file name only; file storage is outside the app.
    """

    full_name: str
    business_name: str
    address: str
    government_id_type: str
    government_id_proof: str = Field(description="File name of the ID proof")
    loan_amount: Decimal = Field(gt=0)
    loan_purpose: str = Field(description="Purpose, 'Other: <text>' for custom purposes")
    loan_term: int = Field(gt=0, description="Term in months")
    interest_rate: Decimal = Field(ge=0, description="Annual percentage")
    scheme: str = Field(description="Name of the scheme")
    account_holder_name: str
    bank_name: str
    account_number: str
    ifsc_code: str
    bank_proof: str = Field(description="File name of the bank proof")

    @property
    def terms(self) -> LoanTerms:
        return LoanTerms(
            principal=self.loan_amount,
            annual_interest_rate_percent=self.interest_rate,
            term_months=self.loan_term,
        )


class LoanApplicationRecord(LoanApplicationDraft):
    """An application accepted into the session ledger."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    status: ApplicationStatus = ApplicationStatus.PENDING
    application_date: datetime = Field(default_factory=datetime.now)
    loan_balance: Optional[Decimal] = None
    next_payment_date: Optional[date] = None

    @classmethod
    def from_draft(cls, draft: LoanApplicationDraft, **overrides) -> "LoanApplicationRecord":
        return cls(**draft.model_dump(), **overrides)

    @property
    def is_approved(self) -> bool:
        return self.status == ApplicationStatus.APPROVED


# =============================================================================
# EXTERNAL LOANS
# =============================================================================


class ExternalLoan(BaseModel):
    """A loan taken from another lender, tracked for comparison."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    lender_name: str = Field(min_length=1)
    loan_amount: Decimal = Field(gt=0)
    interest_rate: Decimal = Field(ge=0, description="Annual percentage")
    loan_term: int = Field(gt=0, description="Term in months")
    start_date: date

    @field_validator("lender_name")
    @classmethod
    def validate_lender_name(cls, v: str) -> str:
        """Lender name cannot be blank."""
        if not v.strip():
            raise ValueError("Lender name cannot be empty")
        return v.strip()

    @property
    def end_date(self) -> date:
        """Date of the last installment: start date plus the term."""
        return self.start_date + relativedelta(months=self.loan_term)

    @property
    def terms(self) -> LoanTerms:
        return LoanTerms(
            principal=self.loan_amount,
            annual_interest_rate_percent=self.interest_rate,
            term_months=self.loan_term,
        )


__all__ = [
    "ApplicationStatus",
    "LoanApplicationDraft",
    "LoanApplicationRecord",
    "ExternalLoan",
]
