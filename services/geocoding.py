"""Nominatim (OpenStreetMap) geocoding client.

Results are restricted to the configured country and language. Every call is
bounded by the client timeout and is never retried; failures surface as
GeocodingError subclasses for the error handlers to translate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_USER_AGENT = "TechBookRentalApp/1.0 (contact@techbook.kz)"


class GeocodingError(Exception):
    """Upstream service failed or answered with something unusable."""


class GeocodingTimeout(GeocodingError):
    pass


class AddressNotFound(GeocodingError):
    pass


@dataclass(frozen=True)
class GeocodeResult:
    lat: float
    lon: float
    display_name: Optional[str] = None


def _parse_result(item: Any) -> Optional[GeocodeResult]:
    """Convert one Nominatim entry; None if its coordinates do not parse."""
    try:
        return GeocodeResult(float(item["lat"]), float(item["lon"]), item.get("display_name"))
    except (KeyError, TypeError, ValueError):
        return None


class NominatimGeocoder:
    def __init__(
        self,
        base_url: str = NOMINATIM_URL,
        country_code: str = "kz",
        language: str = "ru",
        max_results: int = 5,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url
        self.country_code = country_code
        self.language = language
        self.max_results = max_results
        # Nominatim's usage policy requires an identifying User-Agent
        headers = {"User-Agent": user_agent, "Accept-Language": language}
        if client is None:
            client = httpx.Client(timeout=timeout, headers=headers)
        else:
            client.headers.update(headers)
        self._client = client

    @classmethod
    def from_config(cls, config, client: Optional[httpx.Client] = None) -> "NominatimGeocoder":
        return cls(
            base_url=config["GEOCODING_BASE_URL"],
            country_code=config["GEOCODING_COUNTRY_CODE"],
            language=config["GEOCODING_LANGUAGE"],
            max_results=config["GEOCODING_MAX_RESULTS"],
            timeout=config["GEOCODING_TIMEOUT_SECONDS"],
            user_agent=config["GEOCODING_USER_AGENT"],
            client=client,
        )

    def close(self) -> None:
        self._client.close()

    def _search(self, query: str) -> list:
        if not query or not query.strip():
            raise ValueError("Address must not be empty")

        params = {
            "q": query,
            "format": "json",
            "limit": self.max_results,
            "countrycodes": self.country_code,
            "accept-language": self.language,
            "addressdetails": 1,
        }
        logger.debug("Geocoding request: %s %s", self.base_url, params)
        try:
            response = self._client.get(self.base_url, params=params)
        except httpx.TimeoutException:
            logger.warning("Geocoding request timed out for address: %s", query)
            raise GeocodingTimeout("Geocoding request timed out")
        except httpx.HTTPError as exc:
            logger.error("Network error during geocoding: %s", exc)
            raise GeocodingError(f"Network error: {exc}")

        if response.status_code != 200:
            logger.warning("Nominatim API returned status code: %s", response.status_code)
            raise GeocodingError(f"Geocoding service error: {response.status_code}")

        try:
            results = response.json()
        except ValueError:
            logger.error("Failed to parse Nominatim response")
            raise GeocodingError("Malformed geocoding response")
        if not isinstance(results, list):
            raise GeocodingError("Malformed geocoding response")
        if not results:
            logger.info("Address not found: %s", query)
            raise AddressNotFound("Address not found")
        return results

    def geocode(self, address: str) -> GeocodeResult:
        """First match for the address."""
        first = self._search(address)[0]
        result = _parse_result(first)
        if result is None:
            logger.error("Failed to parse coordinates: %r", first)
            raise GeocodingError("Could not parse coordinates")
        logger.info("Geocoded address: %s -> %s, %s (%s)", address, result.lat, result.lon, result.display_name)
        return result

    def geocode_multiple(self, query: str) -> List[GeocodeResult]:
        """All matches whose coordinates parse, for address suggestions."""
        parsed = (_parse_result(item) for item in self._search(query))
        return [r for r in parsed if r is not None]
