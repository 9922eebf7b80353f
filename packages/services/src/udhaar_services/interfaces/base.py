"""Submission backend contract.

The application form engine never decides whether an application is
accepted. That decision belongs to a submission backend: any object with
an async ``submit`` method returning a ``SubmissionResult``. The protocol
uses structural subtyping, so no inheritance is required.

Example Usage:
    ```python
    from udhaar_services.interfaces.base import SubmissionBackend, SubmissionResult

    class HttpSubmissionBackend:
        name = "http"

        async def submit(self, application: LoanApplicationDraft) -> SubmissionResult:
            response = await client.post("/applications", json=application.model_dump())
            if response.is_error:
                return SubmissionResult.failure("Server rejected the application")
            return SubmissionResult.success(reference=response.json()["id"])
    ```
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from .types import LoanApplicationDraft


# =============================================================================
# ENUMERATIONS
# =============================================================================

class SubmissionStatus(str, Enum):
    """Outcome of a submission attempt."""

    ACCEPTED = "accepted"
    """Backend accepted the application."""

    FAILED = "failed"
    """Backend could not process the application."""


# =============================================================================
# RESULT MODELS
# =============================================================================

class SubmissionResult(BaseModel):
    """Standardized outcome of a submission backend call.

    Attributes:
        status: Accepted or failed
        reference: Backend reference for an accepted application
        error: Message shown to the applicant when the submission failed
        backend: Name of the backend that produced this result
        submitted_at: When the backend answered
        metadata: Additional backend context
    """

    status: SubmissionStatus = Field(
        default=SubmissionStatus.ACCEPTED,
        description="Outcome of the submission",
    )
    reference: Optional[str] = Field(
        default=None,
        description="Backend reference of an accepted application",
    )
    error: Optional[str] = Field(
        default=None,
        description="Error message if status is FAILED",
    )
    backend: Optional[str] = Field(
        default=None,
        description="Name of the backend that produced this result",
    )
    submitted_at: datetime = Field(
        default_factory=datetime.now,
        description="When the backend answered",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional backend context",
    )

    @property
    def is_success(self) -> bool:
        """Check if the application was accepted."""
        return self.status == SubmissionStatus.ACCEPTED

    @classmethod
    def success(
        cls,
        *,
        reference: Optional[str] = None,
        backend: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> SubmissionResult:
        """Create an accepted result."""
        return cls(
            status=SubmissionStatus.ACCEPTED,
            reference=reference,
            backend=backend,
            metadata=metadata or {},
        )

    @classmethod
    def failure(
        cls,
        message: str,
        *,
        backend: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> SubmissionResult:
        """Create a failed result with the given message."""
        return cls(
            status=SubmissionStatus.FAILED,
            error=message,
            backend=backend,
            metadata=metadata or {},
        )


# =============================================================================
# BACKEND PROTOCOL
# =============================================================================

@runtime_checkable
class SubmissionBackend(Protocol):
    """Contract for anything that accepts loan applications.

    Notes:
        - ``submit`` MUST NOT raise for a rejected application; it returns
          a FAILED result instead
        - ``name`` identifies the backend in logs and results
    """

    name: str

    async def submit(self, application: LoanApplicationDraft) -> SubmissionResult:
        """Submit a validated application.

        Args:
            application: The application as assembled from the form

        Returns:
            SubmissionResult with ACCEPTED or FAILED status
        """
        ...


__all__ = [
    "SubmissionStatus",
    "SubmissionResult",
    "SubmissionBackend",
]
