"""Checks applied to proof documents when the user picks a file.

A file that fails these checks is never kept as the field value, so the
form engine only has to test whether a file reference is present.
"""

from typing import Iterable, Optional

from .exceptions import ValidationError
from .models import FileReference

ALLOWED_CONTENT_TYPES: frozenset[str] = frozenset(
    {"application/pdf", "image/jpeg", "image/png"}
)
MAX_UPLOAD_BYTES = 5 * 1024 * 1024

INVALID_TYPE_MESSAGE = "Invalid file type. Please upload a PDF, JPG, or PNG."
_KIB = 1024
_MIB = 1024 * _KIB


def too_large_message(max_size_bytes: int = MAX_UPLOAD_BYTES) -> str:
    if max_size_bytes % _MIB == 0:
        limit = f"{max_size_bytes // _MIB}MB"
    elif max_size_bytes % _KIB == 0:
        limit = f"{max_size_bytes // _KIB}KB"
    else:
        limit = f"{max_size_bytes} bytes"
    return f"File is too large. Maximum size is {limit}."


TOO_LARGE_MESSAGE = too_large_message()

# Proof field -> label used in the "required" message
_PROOF_LABELS = {
    "government_id_proof": "ID",
    "bank_proof": "Bank",
}


def missing_proof_message(field: str) -> str:
    """Message shown when a proof field has no file."""
    return f"{_PROOF_LABELS.get(field, 'Document')} proof is required."


def check_upload(
    file: Optional[FileReference],
    field: str,
    *,
    allowed_content_types: Iterable[str] = ALLOWED_CONTENT_TYPES,
    max_size_bytes: int = MAX_UPLOAD_BYTES,
) -> Optional[str]:
    """Return an error message for an unacceptable upload, or None."""
    if file is None:
        return missing_proof_message(field)
    if file.content_type not in set(allowed_content_types):
        return INVALID_TYPE_MESSAGE
    if file.size_bytes > max_size_bytes:
        return too_large_message(max_size_bytes)
    return None


def accept_upload(
    file: Optional[FileReference],
    field: str,
    **limits,
) -> tuple[Optional[FileReference], Optional[str]]:
    """
    Decide what a proof field holds after the user picks a file.

    Returns:
        (value to keep, error message). A rejected file yields (None, message).
    """
    error = check_upload(file, field, **limits)
    if error:
        return None, error
    return file, None


def ensure_acceptable_upload(
    file: Optional[FileReference],
    field: str,
    **limits,
) -> FileReference:
    """Like ``accept_upload`` but raise instead of returning the error.

    Raises:
        ValidationError: If the file is missing, of the wrong type or too large
    """
    error = check_upload(file, field, **limits)
    if error:
        raise ValidationError(
            error,
            field=field,
            value=file.name if file else None,
            constraint="PDF, JPEG or PNG within the upload size limit",
        )
    return file


__all__ = [
    "ALLOWED_CONTENT_TYPES",
    "MAX_UPLOAD_BYTES",
    "INVALID_TYPE_MESSAGE",
    "TOO_LARGE_MESSAGE",
    "too_large_message",
    "missing_proof_message",
    "check_upload",
    "accept_upload",
    "ensure_acceptable_upload",
]
