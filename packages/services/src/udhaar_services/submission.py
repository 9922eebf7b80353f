"""Submitting loan applications.

``ApplicationSubmitter`` ties the pieces together: it re-validates the
form with the core engine, assembles the application, hands it to a
``SubmissionBackend`` and records accepted applications in the ledger.

``MockSubmissionBackend`` stands in for a real server. It waits for a
configurable delay and rejects applications whose business name contains
the configured failure keyword, so the failure path can be exercised by
hand.
"""

import asyncio
from decimal import Decimal
from typing import Any, Mapping, Optional
from uuid import uuid4

import structlog
from pydantic import BaseModel, Field

from udhaar_core.exceptions import SubmissionError
from udhaar_core.form_engine import (
    ApplicationFormEngine,
    FormField,
    clamp_term,
    parse_amount,
    raise_if_invalid,
    resolve_loan_purpose,
)
from udhaar_core.models import FileReference, Scheme, ValidationOutcome
from udhaar_core.uploads import accept_upload, check_upload

from .config import SubmissionConfig, UdhaarConfig
from .interfaces.base import SubmissionBackend, SubmissionResult
from .interfaces.types import LoanApplicationDraft, LoanApplicationRecord
from .ledger import LoanApplicationLedger

logger = structlog.get_logger()

FAILURE_MESSAGE = (
    "We couldn't process your application at this time. "
    "Please check your details or try again later."
)

PROOF_FIELDS = (FormField.GOVERNMENT_ID_PROOF, FormField.BANK_PROOF)


class MockSubmissionBackend:
    """In-process backend with simulated latency and a keyword-triggered failure."""

    name = "mock"

    def __init__(self, config: Optional[SubmissionConfig] = None):
        self.config = config or SubmissionConfig()

    async def submit(self, application: LoanApplicationDraft) -> SubmissionResult:
        if self.config.simulated_delay_seconds:
            await asyncio.sleep(self.config.simulated_delay_seconds)

        keyword = self.config.failure_keyword
        if keyword and keyword.lower() in application.business_name.lower():
            logger.info(
                "mock_submission_rejected",
                business_name=application.business_name,
            )
            return SubmissionResult.failure(FAILURE_MESSAGE, backend=self.name)

        return SubmissionResult.success(reference=str(uuid4()), backend=self.name)


class ApplicationSubmission(BaseModel):
    """What happened when the applicant pressed submit."""

    validation: ValidationOutcome = Field(default_factory=ValidationOutcome)
    result: Optional[SubmissionResult] = None
    record: Optional[LoanApplicationRecord] = None
    redirect_url: Optional[str] = Field(
        default=None,
        description="Portal to continue on, for government schemes",
    )

    @property
    def succeeded(self) -> bool:
        return self.record is not None

    @property
    def error(self) -> Optional[str]:
        if self.result is not None and not self.result.is_success:
            return self.result.error
        return None


def _file_name(value: Any) -> str:
    if isinstance(value, FileReference):
        return value.name
    return str(value or "")


def _text(values: Mapping[str, Any], field: FormField) -> str:
    return str(values.get(field.value) or "").strip()


def build_draft(
    values: Mapping[str, Any],
    scheme: Scheme,
    loan_term: int,
) -> LoanApplicationDraft:
    """Assemble the application sent to the backend from validated form values."""
    amount = parse_amount(values.get(FormField.LOAN_AMOUNT.value))
    return LoanApplicationDraft(
        full_name=_text(values, FormField.FULL_NAME),
        business_name=_text(values, FormField.BUSINESS_NAME),
        address=_text(values, FormField.ADDRESS),
        government_id_type=_text(values, FormField.GOVERNMENT_ID_TYPE),
        government_id_proof=_file_name(values.get(FormField.GOVERNMENT_ID_PROOF.value)),
        loan_amount=amount if amount is not None else Decimal("0"),
        loan_purpose=resolve_loan_purpose(
            _text(values, FormField.LOAN_PURPOSE),
            _text(values, FormField.OTHER_PURPOSE),
        ),
        loan_term=loan_term,
        interest_rate=scheme.interest_rate,
        scheme=scheme.name,
        account_holder_name=_text(values, FormField.ACCOUNT_HOLDER_NAME),
        bank_name=_text(values, FormField.BANK_NAME),
        account_number=_text(values, FormField.ACCOUNT_NUMBER),
        ifsc_code=_text(values, FormField.IFSC_CODE),
        bank_proof=_file_name(values.get(FormField.BANK_PROOF.value)),
    )


class ApplicationSubmitter:
    """
    Validate, submit and record loan applications.

    Args:
        backend: Where applications are sent
        ledger: Session ledger receiving accepted applications
        engine: Form engine used to re-validate before sending
        config: Upload limits and term bounds; loaded from the environment when omitted
    """

    def __init__(
        self,
        backend: SubmissionBackend,
        ledger: Optional[LoanApplicationLedger] = None,
        engine: Optional[ApplicationFormEngine] = None,
        config: Optional[UdhaarConfig] = None,
    ):
        self.backend = backend
        self.ledger = ledger if ledger is not None else LoanApplicationLedger()
        self.engine = engine or ApplicationFormEngine()
        self.config = config or UdhaarConfig()

    def accept_upload(
        self,
        file: Optional[FileReference],
        field: str,
    ) -> tuple[Optional[FileReference], Optional[str]]:
        """Check a picked proof file against the configured upload limits."""
        return accept_upload(file, field, **self.config.upload.limits())

    def clamp_term(self, term_months: int) -> int:
        """Keep a term within the configured estimator bounds."""
        return clamp_term(
            term_months,
            self.config.loan.min_term_months,
            self.config.loan.max_term_months,
        )

    def _upload_errors(self, values: Mapping[str, Any]) -> dict[str, str]:
        errors: dict[str, str] = {}
        for field in PROOF_FIELDS:
            file = values.get(field.value)
            if isinstance(file, FileReference):
                error = check_upload(file, field.value, **self.config.upload.limits())
                if error:
                    errors[field.value] = error
        return errors

    async def submit(
        self,
        values: Mapping[str, Any],
        scheme: Optional[Scheme],
        loan_term: int,
        *,
        strict: bool = False,
    ) -> ApplicationSubmission:
        """
        Submit the form.

        The ``scheme`` argument is the selected scheme; it replaces whatever
        the form values hold for the scheme field. Proofs are re-checked
        against the configured upload limits and the term is kept within
        the configured bounds.

        Args:
            values: Field values keyed by field identifier
            scheme: Selected scheme
            loan_term: Selected term in months
            strict: Raise instead of returning validation or backend failures

        Returns:
            ApplicationSubmission describing the outcome

        Raises:
            ValidationError: In strict mode, when any required field is invalid
            SubmissionError: In strict mode, when the backend rejects the application
        """
        values = {**values, FormField.SCHEME.value: scheme.id if scheme else ""}
        context = self.engine.context_for(values, scheme)

        if context.is_government:
            logger.info("government_scheme_redirect", scheme=scheme.id, link=scheme.link)
            return ApplicationSubmission(redirect_url=scheme.link)

        outcome = self.engine.validate_for_submission(values, context)
        upload_errors = {
            field: error
            for field, error in self._upload_errors(values).items()
            if field not in outcome.errors
        }
        if upload_errors:
            logger.info("application_upload_rejected", invalid_fields=sorted(upload_errors))
            outcome = ValidationOutcome(errors={**outcome.errors, **upload_errors})

        if not outcome.is_valid:
            if strict:
                raise_if_invalid(outcome)
            return ApplicationSubmission(validation=outcome)

        draft = build_draft(values, scheme, self.clamp_term(loan_term))
        result = await self.backend.submit(draft)

        if not result.is_success:
            logger.warning(
                "application_submission_failed",
                backend=result.backend,
                error=result.error,
            )
            if strict:
                raise SubmissionError(
                    result.error or "Submission failed",
                    backend=result.backend,
                )
            return ApplicationSubmission(validation=outcome, result=result)

        record = self.ledger.add(LoanApplicationRecord.from_draft(draft))
        logger.info(
            "application_submitted",
            application_id=record.id,
            scheme=scheme.id,
            amount=str(record.loan_amount),
            reference=result.reference,
        )
        return ApplicationSubmission(validation=outcome, result=result, record=record)


__all__ = [
    "FAILURE_MESSAGE",
    "MockSubmissionBackend",
    "ApplicationSubmission",
    "ApplicationSubmitter",
    "build_draft",
]
