"""Tests for the Nominatim geocoding client."""

import httpx
import pytest

from services.geocoding import (
    AddressNotFound,
    GeocodeResult,
    GeocodingError,
    GeocodingTimeout,
    NominatimGeocoder,
)

BASE_URL = "https://geocoder.test/search"

ABAY = {"lat": "43.2389", "lon": "76.8897", "display_name": "Abay Avenue, Almaty"}
DOSTYK = {"lat": "43.2330", "lon": "76.9560", "display_name": "Dostyk Avenue, Almaty"}


def make_geocoder(handler, **kwargs):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return NominatimGeocoder(base_url=BASE_URL, client=client, **kwargs)


def respond_with(payload, status=200, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=payload)
    return handler


class TestGeocode:
    def test_returns_first_result(self):
        geocoder = make_geocoder(respond_with([ABAY, DOSTYK]))
        assert geocoder.geocode("Abay 1") == GeocodeResult(43.2389, 76.8897, "Abay Avenue, Almaty")

    def test_request_is_restricted_and_identified(self):
        seen = []
        geocoder = make_geocoder(respond_with([ABAY], seen=seen), country_code="kz", language="kk",
                                 max_results=3, user_agent="TestAgent/1.0")
        geocoder.geocode("Abay 1")

        request = seen[0]
        assert request.url.params["q"] == "Abay 1"
        assert request.url.params["format"] == "json"
        assert request.url.params["limit"] == "3"
        assert request.url.params["countrycodes"] == "kz"
        assert request.url.params["accept-language"] == "kk"
        assert request.headers["User-Agent"] == "TestAgent/1.0"
        assert request.headers["Accept-Language"] == "kk"

    def test_empty_result_is_not_found(self):
        geocoder = make_geocoder(respond_with([]))
        with pytest.raises(AddressNotFound):
            geocoder.geocode("Nowhere street")

    def test_upstream_error_status(self):
        geocoder = make_geocoder(respond_with({"error": "boom"}, status=503))
        with pytest.raises(GeocodingError) as exc_info:
            geocoder.geocode("Abay 1")
        assert not isinstance(exc_info.value, AddressNotFound)

    def test_unparsable_coordinates(self):
        geocoder = make_geocoder(respond_with([{"lat": "north", "lon": "76.9"}]))
        with pytest.raises(GeocodingError):
            geocoder.geocode("Abay 1")

    def test_non_json_body(self):
        geocoder = make_geocoder(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(GeocodingError):
            geocoder.geocode("Abay 1")

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(GeocodingTimeout):
            make_geocoder(handler).geocode("Abay 1")

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GeocodingError):
            make_geocoder(handler).geocode("Abay 1")

    def test_blank_address_rejected_without_request(self):
        seen = []
        geocoder = make_geocoder(respond_with([ABAY], seen=seen))
        with pytest.raises(ValueError):
            geocoder.geocode("   ")
        assert seen == []


class TestGeocodeMultiple:
    def test_returns_all_parsable_results(self):
        geocoder = make_geocoder(respond_with([ABAY, {"lat": "bad", "lon": "1"}, DOSTYK]))
        results = geocoder.geocode_multiple("Almaty avenue")
        assert [r.display_name for r in results] == ["Abay Avenue, Almaty", "Dostyk Avenue, Almaty"]

    def test_empty_result_is_not_found(self):
        with pytest.raises(AddressNotFound):
            make_geocoder(respond_with([])).geocode_multiple("Nowhere")


def test_from_config_uses_settings():
    config = {
        "GEOCODING_BASE_URL": BASE_URL,
        "GEOCODING_COUNTRY_CODE": "kz",
        "GEOCODING_LANGUAGE": "ru",
        "GEOCODING_MAX_RESULTS": 2,
        "GEOCODING_TIMEOUT_SECONDS": 5.0,
        "GEOCODING_USER_AGENT": "TestAgent/1.0",
    }
    geocoder = NominatimGeocoder.from_config(config)
    try:
        assert geocoder.base_url == BASE_URL
        assert geocoder.max_results == 2
        assert geocoder._client.timeout.read == 5.0
    finally:
        geocoder.close()
    assert geocoder._client.is_closed
