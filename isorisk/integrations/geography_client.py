"""
Geography Lookup Client
=======================

HTTP client for the geography/isotope lookup service, which turns a
declared country (and optional region) into a δ18O profile summary.

Features:
    - Profile lookup with array-unwrapping response parsing
    - ``{"error": ...}`` responses and unreachable service degrade to
      "no profile" (None) instead of raising
    - Consecutive-failure circuit breaker

Author: IsoRisk Team
Version: 1.0.0
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from isorisk.config import settings
from isorisk.geography.profiles import profile_from_lookup_response
from shared.schemas.assessment import IsotopeProfile

logger = logging.getLogger(__name__)


# =============================================================================
# Circuit Breaker
# =============================================================================


class CircuitBreakerOpen(Exception):
    """Raised when the circuit breaker is open and requests are blocked."""
    pass


class CircuitBreaker:
    """
    Opens after ``failure_threshold`` consecutive failures, stays open for
    ``cooldown_seconds``, then lets one trial request through (half-open).
    """

    def __init__(self, failure_threshold: int = 5, cooldown_seconds: float = 60.0):
        self.failure_threshold = failure_threshold
        self.cooldown_seconds = cooldown_seconds
        self._failure_count = 0
        self._opened_at: Optional[datetime] = None

    @property
    def state(self) -> str:
        """Current circuit state: closed, open or half-open."""
        if self._opened_at is None:
            return "closed"
        elapsed = (datetime.now(timezone.utc) - self._opened_at).total_seconds()
        return "half-open" if elapsed >= self.cooldown_seconds else "open"

    def check(self) -> None:
        """Raise CircuitBreakerOpen if requests are currently blocked."""
        if self.state == "open":
            raise CircuitBreakerOpen(
                f"lookup circuit open after {self._failure_count} consecutive failures"
            )

    def record_success(self) -> None:
        self._failure_count = 0
        self._opened_at = None

    def record_failure(self) -> None:
        self._failure_count += 1
        if self._failure_count >= self.failure_threshold:
            self._opened_at = datetime.now(timezone.utc)
            logger.warning(
                f"Lookup circuit opened after {self._failure_count} failures"
            )


class GeographyClient:
    """
    Async client for the geography/isotope lookup service.

    Usage:
        async with GeographyClient() as geography:
            profile = await geography.fetch_profile("India", region="Gujarat")
            if profile is None:
                ...  # score without the isotope term
    """

    PROFILE_PATH = "/isotope/profile"

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout: Optional[float] = None,
        circuit_failure_threshold: Optional[int] = None,
        circuit_cooldown_seconds: Optional[float] = None,
    ):
        """
        Initialize the lookup client.

        Args:
            base_url: Service URL (defaults to config)
            api_token: Bearer token (defaults to config; empty disables auth)
            timeout: Request timeout in seconds
            circuit_failure_threshold: Failures before the circuit opens
            circuit_cooldown_seconds: Seconds before a trial request is allowed
        """
        self.base_url = (base_url or settings.geography_api_url).rstrip("/")
        self.api_token = settings.geography_api_token if api_token is None else api_token
        self.timeout = timeout or settings.geography_timeout_seconds
        self._client: Optional[httpx.AsyncClient] = None
        self._circuit = CircuitBreaker(
            failure_threshold=(
                circuit_failure_threshold or settings.geography_circuit_failure_threshold
            ),
            cooldown_seconds=(
                settings.geography_circuit_cooldown_seconds
                if circuit_cooldown_seconds is None
                else circuit_cooldown_seconds
            ),
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json", "X-Source": "isorisk"}
            if self.api_token:
                headers["Authorization"] = f"Bearer {self.api_token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def fetch_profile(
        self,
        country: str,
        region: Optional[str] = None,
    ) -> Optional[IsotopeProfile]:
        """
        Look up the δ18O profile of a country or region.

        Args:
            country: Declared country
            region: Optional region within the country

        Returns:
            IsotopeProfile, or None when the service has no profile or
            cannot be reached

        Raises:
            httpx.HTTPStatusError: On an error status without an error payload
        """
        if not country or not country.strip():
            return None

        params: Dict[str, Any] = {"country": country.strip()}
        if region:
            params["region"] = region.strip()

        try:
            self._circuit.check()
            client = await self._get_client()
            response = await client.get(self.PROFILE_PATH, params=params)
            payload = _json_or_none(response)
            if response.is_error and payload and payload.get("error"):
                # Service answered; it just has no profile for this place
                self._circuit.record_success()
                return profile_from_lookup_response(payload)
            response.raise_for_status()
            self._circuit.record_success()
            return profile_from_lookup_response(payload)
        except CircuitBreakerOpen as e:
            logger.warning(f"Lookup circuit open - skipping profile for {country}: {e}")
            return None
        except httpx.HTTPStatusError as e:
            self._circuit.record_failure()
            logger.error(f"Profile lookup failed for {country}: {e.response.status_code}")
            raise
        except httpx.TransportError as e:
            self._circuit.record_failure()
            logger.warning(f"Lookup service unreachable: {e}")
            return None

    async def check_health(self) -> Dict[str, Any]:
        """
        Check lookup service health.

        Returns:
            Health status
        """
        client = await self._get_client()

        try:
            response = await client.get("/health")
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            return {"status": "unreachable", "error": str(e)}


def _json_or_none(response: httpx.Response) -> Optional[Dict[str, Any]]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None
