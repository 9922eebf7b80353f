"""Contracts between the application form and its collaborators.

Available Interfaces:
    SubmissionBackend: Protocol for anything that accepts applications
    SubmissionResult: Standardized outcome of a submission
    SubmissionStatus: Enum for submission outcomes

Record Types:
    LoanApplicationDraft: Application sent to a backend
    LoanApplicationRecord: Application kept in the session ledger
    ExternalLoan: Loan from another lender
"""

from udhaar_services.interfaces.base import (
    SubmissionBackend,
    SubmissionResult,
    SubmissionStatus,
)

from udhaar_services.interfaces.types import (
    ApplicationStatus,
    ExternalLoan,
    LoanApplicationDraft,
    LoanApplicationRecord,
)

__all__ = [
    "SubmissionBackend",
    "SubmissionResult",
    "SubmissionStatus",
    "ApplicationStatus",
    "ExternalLoan",
    "LoanApplicationDraft",
    "LoanApplicationRecord",
]
