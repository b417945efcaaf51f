"""
Isotope Profile Construction
============================

Builds IsotopeProfile values from the two places they come from:

    - Direct user entry of δ18O mean/min/max (and optionally sd)
    - The geography/isotope lookup service, whose JSON wraps every scalar
      in a one-element array and reports failures as ``{"error": "..."}``

Direct entry problems are the caller's to fix and raise InvalidInputError.
A lookup response that carries no usable profile is "no profile" (None).

Author: IsoRisk Team
Version: 1.0.0
"""

import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from isorisk.exceptions import InvalidInputError
from shared.schemas.assessment import IsotopeProfile


logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("mean", "min", "max")
_OPTIONAL_FIELDS = ("sd", "median", "q25", "q75")


def profile_from_direct_entry(
    mean: float,
    min_value: float,
    max_value: float,
    sd: Optional[float] = None,
) -> IsotopeProfile:
    """
    Build a profile from values typed in by the user.

    Args:
        mean: Mean δ18O (‰)
        min_value: Minimum δ18O (‰)
        max_value: Maximum δ18O (‰)
        sd: Standard deviation; estimated from the range when omitted or zero

    Returns:
        IsotopeProfile

    Raises:
        InvalidInputError: If min > max, sd is negative, mean lies outside
            the range, or sd cannot be estimated
    """
    if min_value > max_value:
        raise InvalidInputError(
            f"δ18O minimum ({min_value}) is greater than maximum ({max_value})"
        )
    if sd is not None and sd < 0:
        raise InvalidInputError(f"δ18O standard deviation must not be negative, got {sd}")
    try:
        return IsotopeProfile(mean=mean, min=min_value, max=max_value, sd=sd)
    except ValidationError as e:
        raise InvalidInputError(f"invalid δ18O profile: {e.errors()[0]['msg']}") from e


def _first(value: Any) -> Any:
    """Unwrap the service's one-element arrays."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def profile_from_lookup_response(payload: Optional[Mapping[str, Any]]) -> Optional[IsotopeProfile]:
    """
    Build a profile from a lookup-service response.

    Args:
        payload: Decoded JSON body

    Returns:
        IsotopeProfile, or None when the service reported an error or the
        response lacks a usable mean/min/max
    """
    if not payload:
        return None
    if payload.get("error"):
        logger.info(f"Geography lookup returned no profile: {_first(payload['error'])}")
        return None

    values: Dict[str, Any] = {}
    for field in _REQUIRED_FIELDS + _OPTIONAL_FIELDS:
        value = _first(payload.get(field))
        if value is not None:
            values[field] = value

    missing = [field for field in _REQUIRED_FIELDS if field not in values]
    if missing:
        logger.warning(f"Geography lookup response missing fields: {', '.join(missing)}")
        return None

    try:
        return IsotopeProfile(**values)
    except ValidationError as e:
        logger.warning(f"Geography lookup response is not a valid profile: {e.errors()[0]['msg']}")
        return None
