"""Built-in loan scheme catalog.

The direct scheme is processed inside the app. Government schemes are
listed for discovery only; applying for them happens on the linked portal.
"""

from decimal import Decimal
from typing import Iterable, Optional

from .exceptions import SchemeNotFoundError
from .models import Scheme, SchemeType

DEFAULT_SCHEMES: tuple[Scheme, ...] = (
    Scheme(
        id="s1",
        name="UDHAAR SETU QuickLoan",
        description=(
            "A quick and easy loan for your immediate business needs, "
            "with flexible repayment options."
        ),
        interest_rate=Decimal("7"),
        max_loan_amount=Decimal("50000"),
        type=SchemeType.INTERNAL,
        link="#",
    ),
    Scheme(
        id="s2",
        name="Pradhan Mantri MUDRA Yojana (PMMY)",
        description=(
            "A flagship scheme to provide loans up to ₹10 lakh to "
            "non-corporate, non-farm small/micro enterprises."
        ),
        interest_rate=Decimal("9.75"),
        max_loan_amount=Decimal("1000000"),
        type=SchemeType.GOVERNMENT,
        link="https://www.mudra.org.in/",
    ),
    Scheme(
        id="s3",
        name="Stand-Up India Scheme",
        description=(
            "Facilitates bank loans between ₹10 lakh and ₹1 Crore to at least "
            "one Scheduled Caste (SC) or Scheduled Tribe (ST) borrower and at "
            "least one woman borrower per bank branch for setting up a "
            "greenfield enterprise."
        ),
        interest_rate=Decimal("8.5"),
        max_loan_amount=Decimal("10000000"),
        type=SchemeType.GOVERNMENT,
        link="https://www.standupmitra.in/",
    ),
)


def find_scheme(
    scheme_id: Optional[str],
    schemes: Iterable[Scheme] = DEFAULT_SCHEMES,
) -> Optional[Scheme]:
    """Return the scheme with the given id, or None."""
    if not scheme_id:
        return None
    return next((s for s in schemes if s.id == scheme_id), None)


def get_scheme(scheme_id: str, schemes: Iterable[Scheme] = DEFAULT_SCHEMES) -> Scheme:
    """Return the scheme with the given id.

    Raises:
        SchemeNotFoundError: If no scheme has that id
    """
    scheme = find_scheme(scheme_id, schemes)
    if scheme is None:
        raise SchemeNotFoundError(
            f"Unknown loan scheme: {scheme_id}",
            scheme_id=scheme_id,
        )
    return scheme


def default_scheme(schemes: Iterable[Scheme] = DEFAULT_SCHEMES) -> Optional[Scheme]:
    """The scheme preselected when the application form opens."""
    return next(iter(schemes), None)


def direct_schemes(schemes: Iterable[Scheme] = DEFAULT_SCHEMES) -> list[Scheme]:
    return [s for s in schemes if s.type == SchemeType.INTERNAL]


def government_schemes(schemes: Iterable[Scheme] = DEFAULT_SCHEMES) -> list[Scheme]:
    return [s for s in schemes if s.type == SchemeType.GOVERNMENT]


__all__ = [
    "DEFAULT_SCHEMES",
    "find_scheme",
    "get_scheme",
    "default_scheme",
    "direct_schemes",
    "government_schemes",
]
