"""Udhaar Setu Core - Loan repayment estimates and application form validation."""

__version__ = "0.1.0"

from .amortization import AmortizationCalculator, compute_schedule, compute_summary
from .exceptions import (
    ConfigurationError,
    SchemeNotFoundError,
    SubmissionError,
    UdhaarError,
    ValidationError,
)
from .form_engine import ApplicationFormEngine, FormField
from .formatting import format_rupees
from .models import (
    AmortizationRow,
    FileReference,
    FormContext,
    FormMode,
    FormProgress,
    LoanTerms,
    RepaymentSummary,
    Scheme,
    SchemeType,
    ValidationOutcome,
)

__all__ = [
    "AmortizationCalculator",
    "compute_summary",
    "compute_schedule",
    "ApplicationFormEngine",
    "FormField",
    "format_rupees",
    "AmortizationRow",
    "FileReference",
    "FormContext",
    "FormMode",
    "FormProgress",
    "LoanTerms",
    "RepaymentSummary",
    "Scheme",
    "SchemeType",
    "ValidationOutcome",
    "UdhaarError",
    "ValidationError",
    "SchemeNotFoundError",
    "SubmissionError",
    "ConfigurationError",
]
