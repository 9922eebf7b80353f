"""Shared fixtures for service tests."""

import os

import pytest
import structlog

from udhaar_core import FileReference, FormField
from udhaar_services.config import SubmissionConfig


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep UDHAAR_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("UDHAAR_"):
            monkeypatch.delenv(key, raising=False)
    yield
    structlog.reset_defaults()


@pytest.fixture
def instant_config() -> SubmissionConfig:
    """Mock backend settings without the artificial latency."""
    return SubmissionConfig(simulated_delay_seconds=0)


@pytest.fixture
def form_values() -> dict:
    """A complete, valid QuickLoan application."""
    return {
        FormField.FULL_NAME.value: "Ravi Kumar",
        FormField.BUSINESS_NAME.value: "Kumar Kirana Store",
        FormField.ADDRESS.value: "4 Station Road, Nagpur",
        FormField.GOVERNMENT_ID_TYPE.value: "PAN Card",
        FormField.GOVERNMENT_ID_PROOF.value: FileReference(
            name="pan.jpg", content_type="image/jpeg", size_bytes=150_000
        ),
        FormField.LOAN_AMOUNT.value: "30000",
        FormField.LOAN_PURPOSE.value: "Inventory Purchase",
        FormField.OTHER_PURPOSE.value: "",
        FormField.SCHEME.value: "s1",
        FormField.ACCOUNT_HOLDER_NAME.value: "Ravi Kumar",
        FormField.BANK_NAME.value: "Canara Bank",
        FormField.ACCOUNT_NUMBER.value: "0123456789",
        FormField.IFSC_CODE.value: "CNRB0001234",
        FormField.BANK_PROOF.value: FileReference(
            name="cheque.pdf", content_type="application/pdf", size_bytes=90_000
        ),
    }
