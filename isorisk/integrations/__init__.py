"""
IsoRisk Integrations Package
============================

Clients for services outside the engine.

This package provides:
    - geography_client: Geography/isotope lookup service client

Author: IsoRisk Team
Version: 1.0.0
"""

from isorisk.integrations.geography_client import (
    CircuitBreaker,
    CircuitBreakerOpen,
    GeographyClient,
)

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerOpen",
    "GeographyClient",
]
