"""Udhaar Setu Services - Configuration, submission and session ledgers."""

from udhaar_services.config import (
    LoanLimitsConfig,
    SubmissionConfig,
    UdhaarConfig,
    UploadConfig,
)
from udhaar_services.ledger import ExternalLoanTracker, LoanApplicationLedger
from udhaar_services.submission import (
    ApplicationSubmission,
    ApplicationSubmitter,
    MockSubmissionBackend,
)

__version__ = "0.1.0"

__all__ = [
    "LoanLimitsConfig",
    "SubmissionConfig",
    "UdhaarConfig",
    "UploadConfig",
    "ExternalLoanTracker",
    "LoanApplicationLedger",
    "ApplicationSubmission",
    "ApplicationSubmitter",
    "MockSubmissionBackend",
]
