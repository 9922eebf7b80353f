"""Field validation and completion tracking for the loan application form.

Which fields are required depends on the selected scheme and loan purpose:

- Direct schemes require personal details, ID type and proof, a loan
  amount within the scheme's ceiling, a purpose (plus a free-text purpose
  when "Other" is chosen) and bank details with proof.
- Government schemes require nothing locally. The applicant is sent to
  the scheme's own portal, so every validator passes and completion is
  always 100%.

Validation failures are returned as messages keyed by field, never raised,
so that a progress bar and inline errors can be refreshed on every edit.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence

import structlog

from .exceptions import ValidationError
from .formatting import format_rupees
from .models import (
    FormContext,
    FormMode,
    FormProgress,
    Scheme,
    ValidationOutcome,
)
from .uploads import missing_proof_message

logger = structlog.get_logger()


# =============================================================================
# FORM VOCABULARY
# =============================================================================

class FormField(str, Enum):
    """Identifiers of the application form fields."""
    FULL_NAME = "full_name"
    BUSINESS_NAME = "business_name"
    ADDRESS = "address"
    GOVERNMENT_ID_TYPE = "government_id_type"
    GOVERNMENT_ID_PROOF = "government_id_proof"
    LOAN_AMOUNT = "loan_amount"
    LOAN_PURPOSE = "loan_purpose"
    OTHER_PURPOSE = "other_purpose"
    SCHEME = "scheme"
    ACCOUNT_HOLDER_NAME = "account_holder_name"
    BANK_NAME = "bank_name"
    ACCOUNT_NUMBER = "account_number"
    IFSC_CODE = "ifsc_code"
    BANK_PROOF = "bank_proof"


GOVERNMENT_ID_TYPES: tuple[str, ...] = (
    "Aadhar Card",
    "PAN Card",
    "Voter ID Card",
    "Driving License",
    "Passport",
)

OTHER_PURPOSE = "Other"

LOAN_PURPOSES: tuple[str, ...] = (
    "Working Capital",
    "Purchase Equipment",
    "Inventory Purchase",
    "Business Expansion",
    "Marketing and Sales",
    OTHER_PURPOSE,
)

# Estimator slider bounds
MIN_TERM_MONTHS = 6
MAX_TERM_MONTHS = 72

ACCOUNT_NUMBER_PATTERN = re.compile(r"[0-9]{9,18}")
IFSC_PATTERN = re.compile(r"[A-Z]{4}0[A-Z0-9]{6}")


# =============================================================================
# REQUIRED-FIELD RULES
# =============================================================================

BASE_REQUIRED_FIELDS: tuple[FormField, ...] = (
    FormField.FULL_NAME,
    FormField.BUSINESS_NAME,
    FormField.ADDRESS,
    FormField.GOVERNMENT_ID_TYPE,
    FormField.GOVERNMENT_ID_PROOF,
    FormField.LOAN_AMOUNT,
    FormField.LOAN_PURPOSE,
    FormField.SCHEME,
    FormField.ACCOUNT_HOLDER_NAME,
    FormField.BANK_NAME,
    FormField.ACCOUNT_NUMBER,
    FormField.IFSC_CODE,
    FormField.BANK_PROOF,
)

_DEFAULT = "_default"

# Key structure: REQUIRED_FIELD_RULES[form_mode][loan_purpose]
# Falls back: specific purpose -> mode + "_default"
REQUIRED_FIELD_RULES: dict[FormMode, dict[str, tuple[FormField, ...]]] = {
    FormMode.DIRECT: {
        _DEFAULT: BASE_REQUIRED_FIELDS,
        OTHER_PURPOSE: BASE_REQUIRED_FIELDS + (FormField.OTHER_PURPOSE,),
    },
    FormMode.GOVERNMENT: {
        _DEFAULT: (),
    },
}


def required_fields(context: FormContext) -> tuple[FormField, ...]:
    """Ordered required-field set for the current selections."""
    rules = REQUIRED_FIELD_RULES[context.mode]
    return rules.get(context.loan_purpose, rules[_DEFAULT])


# =============================================================================
# FIELD VALIDATORS
# =============================================================================

Validator = Callable[[Any, FormContext], Optional[str]]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return not str(value).strip()


def _required_text(message: str) -> Validator:
    def validate(value: Any, context: FormContext) -> Optional[str]:
        return message if _is_blank(value) else None
    return validate


def _required_file(field: FormField) -> Validator:
    def validate(value: Any, context: FormContext) -> Optional[str]:
        return missing_proof_message(field.value) if not value else None
    return validate


def _matches(pattern: re.Pattern, message: str) -> Validator:
    def validate(value: Any, context: FormContext) -> Optional[str]:
        text = "" if value is None else str(value)
        return None if pattern.fullmatch(text) else message
    return validate


def parse_amount(value: Any) -> Optional[Decimal]:
    """Read a loan amount from form input. Returns None when not a finite number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    return amount if amount.is_finite() else None


def _validate_loan_amount(value: Any, context: FormContext) -> Optional[str]:
    if _is_blank(value):
        return "Loan amount is required."
    amount = parse_amount(value)
    if amount is None or amount <= 0:
        return "Please enter a valid positive number."
    scheme = context.scheme
    if scheme is not None and amount > scheme.max_loan_amount:
        return f"Amount cannot exceed {format_rupees(scheme.max_loan_amount)} for this scheme."
    return None


def _validate_other_purpose(value: Any, context: FormContext) -> Optional[str]:
    if context.loan_purpose == OTHER_PURPOSE and _is_blank(value):
        return "Please specify the purpose."
    return None


FIELD_VALIDATORS: dict[FormField, Validator] = {
    FormField.FULL_NAME: _required_text("Full name is required."),
    FormField.BUSINESS_NAME: _required_text("Business name is required."),
    FormField.ADDRESS: _required_text("Address is required."),
    FormField.GOVERNMENT_ID_TYPE: _required_text("Please select an ID type."),
    FormField.GOVERNMENT_ID_PROOF: _required_file(FormField.GOVERNMENT_ID_PROOF),
    FormField.ACCOUNT_HOLDER_NAME: _required_text("Account holder's name is required."),
    FormField.BANK_NAME: _required_text("Bank name is required."),
    FormField.ACCOUNT_NUMBER: _matches(
        ACCOUNT_NUMBER_PATTERN, "Enter a valid account number (9-18 digits)."
    ),
    FormField.IFSC_CODE: _matches(
        IFSC_PATTERN, "Enter a valid IFSC code (e.g., SBIN0123456)."
    ),
    FormField.BANK_PROOF: _required_file(FormField.BANK_PROOF),
    FormField.LOAN_AMOUNT: _validate_loan_amount,
    FormField.LOAN_PURPOSE: _required_text("Please select a purpose for the loan."),
    FormField.OTHER_PURPOSE: _validate_other_purpose,
    FormField.SCHEME: _required_text("Please select a loan scheme."),
}


# =============================================================================
# ENGINE
# =============================================================================

class ApplicationFormEngine:
    """
    Validate application fields and track form completion.

    The engine holds no form state. Callers pass the current field values
    (keyed by ``FormField`` value) and a ``FormContext`` on every call.
    """

    def __init__(self, validators: Optional[Mapping[FormField, Validator]] = None):
        self.validators = dict(validators or FIELD_VALIDATORS)

    @staticmethod
    def context_for(values: Mapping[str, Any], scheme: Optional[Scheme]) -> FormContext:
        """Build the context from the selected scheme and the chosen purpose."""
        purpose = values.get(FormField.LOAN_PURPOSE.value) or ""
        return FormContext(scheme=scheme, loan_purpose=str(purpose))

    def required_fields(self, context: FormContext) -> tuple[FormField, ...]:
        return required_fields(context)

    def validate_field(
        self,
        field: str,
        value: Any,
        context: FormContext,
    ) -> Optional[str]:
        """
        Validate one field value.

        Args:
            field: Field identifier
            value: Raw value from the form (string, number or FileReference)
            context: Current scheme and loan purpose

        Returns:
            None if the value is valid, otherwise a human-readable message
        """
        if context.is_government:
            return None
        try:
            validator = self.validators[FormField(field)]
        except (KeyError, ValueError):
            return None
        return validator(value, context)

    def _collect_errors(
        self,
        values: Mapping[str, Any],
        context: FormContext,
        required: Sequence[str],
    ) -> dict[str, str]:
        errors: dict[str, str] = {}
        for field in required:
            key = field.value if isinstance(field, FormField) else str(field)
            error = self.validate_field(key, values.get(key), context)
            if error:
                errors[key] = error
        return errors

    def compute_progress(
        self,
        values: Mapping[str, Any],
        context: FormContext,
        required: Optional[Sequence[str]] = None,
    ) -> FormProgress:
        """
        Compute completion percentage and per-field errors.

        Args:
            values: Current field values keyed by field identifier
            context: Current scheme and loan purpose
            required: Required-field set; derived from the context when omitted

        Returns:
            FormProgress with the rounded completion percentage
        """
        if required is None:
            required = self.required_fields(context)
        if not required:
            return FormProgress(completion_percent=100)

        errors = self._collect_errors(values, context, required)
        valid = len(required) - len(errors)
        percent = (Decimal(valid * 100) / Decimal(len(required))).quantize(
            Decimal(1), rounding=ROUND_HALF_UP
        )
        return FormProgress(completion_percent=int(percent), field_errors=errors)

    def validate_for_submission(
        self,
        values: Mapping[str, Any],
        context: FormContext,
        required: Optional[Sequence[str]] = None,
    ) -> ValidationOutcome:
        """Re-validate every required field and report all failures at once."""
        if context.is_government:
            return ValidationOutcome()
        if required is None:
            required = self.required_fields(context)

        errors = self._collect_errors(values, context, required)
        if errors:
            logger.info(
                "application_validation_failed",
                invalid_fields=sorted(errors),
                scheme=context.scheme.id if context.scheme else None,
            )
        return ValidationOutcome(errors=errors)

    def ensure_submittable(
        self,
        values: Mapping[str, Any],
        context: FormContext,
        required: Optional[Sequence[str]] = None,
    ) -> None:
        """Raise ValidationError carrying every field error when submission is not allowed."""
        raise_if_invalid(self.validate_for_submission(values, context, required))


def raise_if_invalid(outcome: ValidationOutcome) -> None:
    """Turn a failed outcome into a ValidationError carrying every field error."""
    if not outcome.is_valid:
        raise ValidationError(
            f"{len(outcome.errors)} field(s) need attention before submitting.",
            details={"errors": dict(outcome.errors)},
        )


# =============================================================================
# ESTIMATOR HELPERS
# =============================================================================

def clamp_loan_amount(
    amount: Decimal,
    selected: Optional[Scheme],
    previous: Optional[Scheme] = None,
) -> Decimal:
    """
    Loan amount to keep after the selected scheme changes.

    The amount is lowered to the new scheme's ceiling only when moving into
    a direct scheme. Staying on the same scheme never clamps, so the slider
    is not reset while the user is dragging it.
    """
    if selected is None or selected.is_government:
        return amount
    if previous is not None and previous.id == selected.id:
        return amount
    if amount > selected.max_loan_amount:
        logger.debug(
            "loan_amount_clamped",
            scheme=selected.id,
            requested=str(amount),
            maximum=str(selected.max_loan_amount),
        )
        return selected.max_loan_amount
    return amount


def clamp_term(
    term_months: int,
    minimum: int = MIN_TERM_MONTHS,
    maximum: int = MAX_TERM_MONTHS,
) -> int:
    """Keep an estimator term within the slider bounds."""
    return max(minimum, min(maximum, term_months))


def resolve_loan_purpose(purpose: str, other_purpose: str = "") -> str:
    """Purpose text stored on the application record."""
    if purpose == OTHER_PURPOSE:
        return f"{OTHER_PURPOSE}: {other_purpose}"
    return purpose


_default_engine = ApplicationFormEngine()


def validate_field(field: str, value: Any, context: FormContext) -> Optional[str]:
    return _default_engine.validate_field(field, value, context)


def compute_progress(
    values: Mapping[str, Any],
    context: FormContext,
    required: Optional[Sequence[str]] = None,
) -> FormProgress:
    return _default_engine.compute_progress(values, context, required)


def validate_for_submission(
    values: Mapping[str, Any],
    context: FormContext,
    required: Optional[Sequence[str]] = None,
) -> ValidationOutcome:
    return _default_engine.validate_for_submission(values, context, required)


__all__ = [
    "FormField",
    "GOVERNMENT_ID_TYPES",
    "LOAN_PURPOSES",
    "OTHER_PURPOSE",
    "MIN_TERM_MONTHS",
    "MAX_TERM_MONTHS",
    "BASE_REQUIRED_FIELDS",
    "REQUIRED_FIELD_RULES",
    "FIELD_VALIDATORS",
    "required_fields",
    "parse_amount",
    "raise_if_invalid",
    "ApplicationFormEngine",
    "clamp_loan_amount",
    "clamp_term",
    "resolve_loan_purpose",
    "validate_field",
    "compute_progress",
    "validate_for_submission",
]
