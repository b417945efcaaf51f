"""
IsoRisk Exceptions
==================

Error taxonomy for the scoring and sampling engine.

Only invalid input is an error. A missing geography reference degrades to
"no profile" and degenerate lot or defect-rate parameters are clamped, so
neither has an exception class.

Author: IsoRisk Team
Version: 1.0.0
"""


class IsoRiskError(Exception):
    """Base exception for engine errors."""
    pass


class InvalidInputError(IsoRiskError, ValueError):
    """Raised when caller-supplied parameters cannot be evaluated."""
    pass
