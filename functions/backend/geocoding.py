"""
Google Maps Geocoding client.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import requests

from shared.types import Location

logger = logging.getLogger(__name__)

GEOCODING_API_URL = "https://maps.googleapis.com/maps/api/geocode/json"
REQUEST_TIMEOUT_SECONDS = 10
UNKNOWN = "Unknown"


class GeocodingError(Exception):
    pass


class AddressNotFoundError(GeocodingError, LookupError):
    pass


class GeocodingClient(Protocol):
    def reverse_geocode(self, latitude: float, longitude: float) -> Location:
        ...

    def geocode_address(self, address: str) -> tuple[float, float]:
        ...


def parse_address_components(
    latitude: float, longitude: float, components: list[dict]
) -> Location:
    """
    Picks area, city, state and country out of geocoder address components.

    Each component fills at most one slot, checked in that order. Missing
    city, state and country become "Unknown"; a missing area stays None.
    """
    area = city = state = country = ""
    for component in components:
        types = component.get("types") or []
        name = component.get("long_name") or ""
        if "sublocality_level_1" in types or "sublocality" in types:
            area = name
        elif "neighborhood" in types and not area:
            area = name
        elif "locality" in types:
            city = name
        elif "administrative_area_level_3" in types and not city:
            city = name
        elif "administrative_area_level_1" in types:
            state = name
        elif "country" in types:
            country = name

    return Location(
        latitude=latitude,
        longitude=longitude,
        area=area or None,
        city=city or UNKNOWN,
        state=state or UNKNOWN,
        country=country or UNKNOWN,
    )


@dataclass
class GoogleGeocodingClient:
    api_key: Optional[str]

    def _geocode(self, params: dict, not_found_message: str) -> dict:
        if not self.api_key:
            raise GeocodingError("Google Maps API key is not configured")
        try:
            response = requests.get(
                GEOCODING_API_URL,
                params={**params, "key": self.api_key},
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            logger.exception("Geocoding request failed")
            raise GeocodingError("Failed to fetch location data from Google Maps") from e
        if not response.ok:
            raise GeocodingError("Failed to fetch location data from Google Maps")

        data = response.json()
        if data.get("status") != "OK" or not data.get("results"):
            raise AddressNotFoundError(not_found_message)
        return data["results"][0]

    def reverse_geocode(self, latitude: float, longitude: float) -> Location:
        result = self._geocode(
            {"latlng": f"{latitude},{longitude}"},
            "No location data found for these coordinates",
        )
        return parse_address_components(
            latitude, longitude, result.get("address_components") or []
        )

    def geocode_address(self, address: str) -> tuple[float, float]:
        result = self._geocode({"address": address}, "Address not found")
        location = result["geometry"]["location"]
        return location["lat"], location["lng"]


@dataclass
class InMemoryGeocodingClient:
    """Test double resolving from fixed tables."""

    places: dict[tuple[float, float], list[dict]] = field(default_factory=dict)
    addresses: dict[str, tuple[float, float]] = field(default_factory=dict)

    def reverse_geocode(self, latitude: float, longitude: float) -> Location:
        components = self.places.get((latitude, longitude))
        if components is None:
            raise AddressNotFoundError("No location data found for these coordinates")
        return parse_address_components(latitude, longitude, components)

    def geocode_address(self, address: str) -> tuple[float, float]:
        if address not in self.addresses:
            raise AddressNotFoundError("Address not found")
        return self.addresses[address]
