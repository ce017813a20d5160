# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
"""Haversine distance helpers. All distances are in kilometers."""

import math
from typing import List, Optional, Tuple

from shared.constants import EARTH_RADIUS_KM


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two coordinates, rounded to one decimal.

    Args:
        lat1 (float): Latitude of the first point.
        lon1 (float): Longitude of the first point.
        lat2 (float): Latitude of the second point.
        lon2 (float): Longitude of the second point.

    Returns:
        float: Distance in kilometers.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round(EARTH_RADIUS_KM * c, 1)


def get_coordinates(item: dict) -> Optional[Tuple[float, float]]:
    """Returns (latitude, longitude) from an item's `location`, if both are set."""
    location = item.get("location") or {}
    latitude = location.get("latitude")
    longitude = location.get("longitude")
    if latitude is None or longitude is None:
        return None
    return float(latitude), float(longitude)


def filter_jobs_by_distance(
    jobs: List[dict], user_lat: float, user_lon: float, max_distance: float
) -> List[dict]:
    """Keeps jobs located within `max_distance` km of the user."""
    nearby = []
    for job in jobs:
        coordinates = get_coordinates(job)
        if coordinates is None:
            continue
        if calculate_distance(user_lat, user_lon, *coordinates) <= max_distance:
            nearby.append(job)
    return nearby


def filter_jobs_by_city(jobs: List[dict], user_city: str) -> List[dict]:
    city = user_city.lower()
    return [
        job
        for job in jobs
        if ((job.get("location") or {}).get("city") or "").lower() == city
    ]


def add_distance_to_jobs(
    jobs: List[dict], user_lat: float, user_lon: float
) -> List[dict]:
    """Returns copies of the jobs with a `distance` key (None without coordinates)."""
    results = []
    for job in jobs:
        coordinates = get_coordinates(job)
        distance = (
            calculate_distance(user_lat, user_lon, *coordinates)
            if coordinates
            else None
        )
        results.append({**job, "distance": distance})
    return results
