"""Tests for the application form engine."""

from decimal import Decimal

import pytest

from udhaar_core import (
    ApplicationFormEngine,
    FileReference,
    FormContext,
    FormField,
    FormMode,
    ValidationError,
)
from udhaar_core.form_engine import (
    BASE_REQUIRED_FIELDS,
    clamp_loan_amount,
    clamp_term,
    compute_progress,
    required_fields,
    resolve_loan_purpose,
    validate_field,
    validate_for_submission,
)
from udhaar_core.schemes import get_scheme


def proof(name: str = "proof.pdf") -> FileReference:
    return FileReference(name=name, content_type="application/pdf", size_bytes=200_000)


def complete_values(**overrides) -> dict:
    """A fully valid direct-scheme application."""
    values = {
        FormField.FULL_NAME.value: "Asha Devi",
        FormField.BUSINESS_NAME.value: "Asha Tailoring",
        FormField.ADDRESS.value: "12 MG Road, Pune",
        FormField.GOVERNMENT_ID_TYPE.value: "Aadhar Card",
        FormField.GOVERNMENT_ID_PROOF.value: proof("aadhar.pdf"),
        FormField.LOAN_AMOUNT.value: "25000",
        FormField.LOAN_PURPOSE.value: "Working Capital",
        FormField.OTHER_PURPOSE.value: "",
        FormField.SCHEME.value: "s1",
        FormField.ACCOUNT_HOLDER_NAME.value: "Asha Devi",
        FormField.BANK_NAME.value: "State Bank of India",
        FormField.ACCOUNT_NUMBER.value: "123456789012",
        FormField.IFSC_CODE.value: "SBIN0123456",
        FormField.BANK_PROOF.value: proof("passbook.png"),
    }
    values.update(overrides)
    return values


@pytest.fixture
def engine() -> ApplicationFormEngine:
    return ApplicationFormEngine()


@pytest.fixture
def direct() -> FormContext:
    return FormContext(scheme=get_scheme("s1"), loan_purpose="Working Capital")


@pytest.fixture
def government() -> FormContext:
    return FormContext(scheme=get_scheme("s2"), loan_purpose="Working Capital")


class TestFormContext:
    """Tests for mode selection from the scheme."""

    def test_direct_scheme_is_direct_mode(self, direct):
        assert direct.mode == FormMode.DIRECT
        assert not direct.is_government

    def test_government_scheme_is_government_mode(self, government):
        assert government.mode == FormMode.GOVERNMENT
        assert government.is_government

    def test_no_scheme_is_direct_mode(self):
        assert FormContext().mode == FormMode.DIRECT

    def test_context_for_reads_purpose_from_values(self, engine):
        context = engine.context_for(complete_values(loan_purpose="Other"), get_scheme("s1"))

        assert context.loan_purpose == "Other"
        assert context.scheme.id == "s1"


class TestRequiredFields:
    """Tests for the required-field rule table."""

    def test_direct_mode_uses_base_fields(self, direct):
        fields = required_fields(direct)

        assert fields == BASE_REQUIRED_FIELDS
        assert len(fields) == 13
        assert FormField.OTHER_PURPOSE not in fields

    def test_other_purpose_adds_free_text_field(self):
        context = FormContext(scheme=get_scheme("s1"), loan_purpose="Other")

        fields = required_fields(context)

        assert len(fields) == 14
        assert fields[-1] == FormField.OTHER_PURPOSE

    def test_government_mode_requires_nothing(self, government):
        assert required_fields(government) == ()

    def test_government_mode_ignores_purpose(self):
        context = FormContext(scheme=get_scheme("s3"), loan_purpose="Other")
        assert required_fields(context) == ()


class TestValidateField:
    """Tests for per-field rules."""

    @pytest.mark.parametrize(
        "field, message",
        [
            (FormField.FULL_NAME, "Full name is required."),
            (FormField.BUSINESS_NAME, "Business name is required."),
            (FormField.ADDRESS, "Address is required."),
            (FormField.GOVERNMENT_ID_TYPE, "Please select an ID type."),
            (FormField.ACCOUNT_HOLDER_NAME, "Account holder's name is required."),
            (FormField.BANK_NAME, "Bank name is required."),
            (FormField.LOAN_PURPOSE, "Please select a purpose for the loan."),
            (FormField.SCHEME, "Please select a loan scheme."),
        ],
    )
    def test_blank_text_is_rejected(self, engine, direct, field, message):
        """Whitespace-only input counts as empty."""
        assert engine.validate_field(field.value, "   ", direct) == message
        assert engine.validate_field(field.value, "", direct) == message
        assert engine.validate_field(field.value, "filled in", direct) is None

    def test_missing_proofs(self, engine, direct):
        assert engine.validate_field("government_id_proof", None, direct) == "ID proof is required."
        assert engine.validate_field("bank_proof", None, direct) == "Bank proof is required."
        assert engine.validate_field("bank_proof", proof(), direct) is None

    @pytest.mark.parametrize("code", ["SBIN0123456", "HDFC0ABC123", "ICIC0000001"])
    def test_valid_ifsc(self, engine, direct, code):
        assert engine.validate_field("ifsc_code", code, direct) is None

    @pytest.mark.parametrize(
        "code",
        ["sbin0123456", "SBIN1123456", "SBI0123456", "SBIN01234567", "SBIN012345", ""],
    )
    def test_invalid_ifsc(self, engine, direct, code):
        """Lowercase letters, a non-zero fifth character or a wrong length fail."""
        assert (
            engine.validate_field("ifsc_code", code, direct)
            == "Enter a valid IFSC code (e.g., SBIN0123456)."
        )

    @pytest.mark.parametrize("number", ["123456789", "123456789012", "1" * 18])
    def test_valid_account_number(self, engine, direct, number):
        assert engine.validate_field("account_number", number, direct) is None

    @pytest.mark.parametrize("number", ["12345678", "1" * 19, "12345678a", "1234 56789", ""])
    def test_invalid_account_number(self, engine, direct, number):
        assert (
            engine.validate_field("account_number", number, direct)
            == "Enter a valid account number (9-18 digits)."
        )

    def test_loan_amount_required(self, engine, direct):
        assert engine.validate_field("loan_amount", "", direct) == "Loan amount is required."
        assert engine.validate_field("loan_amount", None, direct) == "Loan amount is required."

    @pytest.mark.parametrize("amount", ["abc", "0", "-5000", 0, "NaN"])
    def test_loan_amount_must_be_positive_number(self, engine, direct, amount):
        assert (
            engine.validate_field("loan_amount", amount, direct)
            == "Please enter a valid positive number."
        )

    def test_loan_amount_above_scheme_maximum(self, engine, direct):
        """Message names the scheme's ceiling in rupees."""
        error = engine.validate_field("loan_amount", "60000", direct)

        assert error == "Amount cannot exceed ₹50,000 for this scheme."
        assert "₹50,000" in error

    @pytest.mark.parametrize("amount", ["50000", 25000, Decimal("49999.50"), "1"])
    def test_loan_amount_within_maximum(self, engine, direct, amount):
        assert engine.validate_field("loan_amount", amount, direct) is None

    def test_other_purpose_only_checked_for_other(self, engine, direct):
        other = FormContext(scheme=get_scheme("s1"), loan_purpose="Other")

        assert engine.validate_field("other_purpose", "", direct) is None
        assert engine.validate_field("other_purpose", "", other) == "Please specify the purpose."
        assert engine.validate_field("other_purpose", "Festival stock", other) is None

    def test_government_mode_accepts_everything(self, engine, government):
        """Government applications bypass all local validation."""
        assert engine.validate_field("ifsc_code", "bad", government) is None
        assert engine.validate_field("loan_amount", "99999999", government) is None
        assert engine.validate_field("full_name", "", government) is None

    def test_unknown_field_is_valid(self, engine, direct):
        assert engine.validate_field("favourite_colour", "", direct) is None

    def test_enum_member_accepted_as_identifier(self, engine, direct):
        assert engine.validate_field(FormField.IFSC_CODE, "sbin0123456", direct) is not None

    def test_module_shortcut(self, direct):
        assert validate_field("ifsc_code", "SBIN0123456", direct) is None


class TestComputeProgress:
    """Tests for completion tracking."""

    def test_all_invalid_is_zero_percent(self, engine, direct):
        progress = engine.compute_progress({}, direct)

        assert progress.completion_percent == 0
        assert progress.is_submittable is False
        assert len(progress.field_errors) == 13

    def test_all_valid_is_complete(self, engine, direct):
        progress = engine.compute_progress(complete_values(), direct)

        assert progress.completion_percent == 100
        assert progress.is_submittable is True
        assert progress.field_errors == {}

    def test_percentage_is_rounded(self, engine, direct):
        """12 of 13 valid fields is 92.3%, shown as 92."""
        values = complete_values(ifsc_code="bad")

        progress = engine.compute_progress(values, direct)

        assert progress.completion_percent == 92
        assert progress.is_submittable is False
        assert list(progress.field_errors) == ["ifsc_code"]

    def test_other_purpose_counts_toward_progress(self, engine):
        """13 of 14 valid fields is 92.86%, shown as 93."""
        values = complete_values(loan_purpose="Other", other_purpose="")
        context = engine.context_for(values, get_scheme("s1"))

        progress = engine.compute_progress(values, context)

        assert progress.completion_percent == 93
        assert "other_purpose" in progress.field_errors

    def test_government_scheme_is_always_complete(self, engine, government):
        """Switching to a government scheme ignores prior field states."""
        progress = engine.compute_progress({"ifsc_code": "bad"}, government)

        assert progress.completion_percent == 100
        assert progress.is_submittable is True
        assert progress.field_errors == {}

    def test_empty_required_set_is_complete(self, engine, direct):
        assert engine.compute_progress({}, direct, required=[]).completion_percent == 100

    def test_explicit_required_set(self, engine, direct):
        progress = engine.compute_progress(
            {"full_name": "Asha", "ifsc_code": "bad"},
            direct,
            required=["full_name", "ifsc_code"],
        )

        assert progress.completion_percent == 50
        assert list(progress.field_errors) == ["ifsc_code"]

    def test_switching_scheme_changes_loan_amount_validity(self, engine):
        """Amount above the direct ceiling is fine once a government scheme is chosen."""
        values = complete_values(loan_amount="200000")

        direct_progress = engine.compute_progress(values, FormContext(scheme=get_scheme("s1")))
        government_progress = engine.compute_progress(values, FormContext(scheme=get_scheme("s2")))

        assert "loan_amount" in direct_progress.field_errors
        assert government_progress.completion_percent == 100

    def test_module_shortcut(self, direct):
        assert compute_progress(complete_values(), direct).completion_percent == 100


class TestValidateForSubmission:
    """Tests for the pre-submit check."""

    def test_reports_every_invalid_field(self, engine, direct):
        values = complete_values(full_name="", account_number="123", bank_proof=None)

        outcome = engine.validate_for_submission(values, direct)

        assert not outcome.is_valid
        assert outcome.errors == {
            "full_name": "Full name is required.",
            "account_number": "Enter a valid account number (9-18 digits).",
            "bank_proof": "Bank proof is required.",
        }

    def test_valid_form_has_no_errors(self, engine, direct):
        outcome = engine.validate_for_submission(complete_values(), direct)

        assert outcome.is_valid
        assert outcome.errors == {}

    def test_government_scheme_passes(self, engine, government):
        assert engine.validate_for_submission({}, government).is_valid

    def test_ensure_submittable_raises_with_all_errors(self, engine, direct):
        values = complete_values(ifsc_code="x", address=" ")

        with pytest.raises(ValidationError) as exc_info:
            engine.ensure_submittable(values, direct)

        errors = exc_info.value.details["errors"]
        assert set(errors) == {"ifsc_code", "address"}
        assert exc_info.value.recoverable is True

    def test_ensure_submittable_passes_for_valid_form(self, engine, direct):
        engine.ensure_submittable(complete_values(), direct)

    def test_module_shortcut(self, direct):
        assert validate_for_submission({}, direct).errors


class TestCustomValidators:
    """The engine accepts an alternative validator table."""

    def test_override_single_field(self, direct):
        from udhaar_core.form_engine import FIELD_VALIDATORS

        validators = dict(FIELD_VALIDATORS)
        validators[FormField.BUSINESS_NAME] = (
            lambda value, context: None if len(str(value)) >= 3 else "Too short."
        )
        engine = ApplicationFormEngine(validators)

        assert engine.validate_field("business_name", "AB", direct) == "Too short."
        assert engine.validate_field("full_name", "", direct) == "Full name is required."


class TestEstimatorHelpers:
    """Tests for scheme-change clamping and term bounds."""

    def test_clamp_when_moving_into_direct_scheme(self):
        amount = clamp_loan_amount(Decimal("200000"), get_scheme("s1"), get_scheme("s2"))
        assert amount == Decimal("50000")

    def test_clamp_without_previous_scheme(self):
        assert clamp_loan_amount(Decimal("75000"), get_scheme("s1")) == Decimal("50000")

    def test_no_clamp_within_same_scheme(self):
        """Dragging the slider on the same scheme never resets the amount."""
        s1 = get_scheme("s1")
        assert clamp_loan_amount(Decimal("75000"), s1, s1) == Decimal("75000")

    def test_no_clamp_when_moving_into_government_scheme(self):
        amount = clamp_loan_amount(Decimal("5000000"), get_scheme("s2"), get_scheme("s1"))
        assert amount == Decimal("5000000")

    def test_amount_below_maximum_is_kept(self):
        assert clamp_loan_amount(Decimal("10000"), get_scheme("s1"), get_scheme("s3")) == Decimal("10000")

    def test_no_scheme_keeps_amount(self):
        assert clamp_loan_amount(Decimal("10000"), None) == Decimal("10000")

    @pytest.mark.parametrize("term, expected", [(3, 6), (6, 6), (24, 24), (72, 72), (100, 72)])
    def test_clamp_term(self, term, expected):
        assert clamp_term(term) == expected

    def test_clamp_term_custom_bounds(self):
        assert clamp_term(48, minimum=12, maximum=36) == 36

    def test_resolve_loan_purpose(self):
        assert resolve_loan_purpose("Other", "Festival stock") == "Other: Festival stock"
        assert resolve_loan_purpose("Working Capital", "ignored") == "Working Capital"
