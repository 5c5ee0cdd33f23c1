"""Fixed placement of known regions on the 100 x 60 bubble-map plane."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

PLANE_WIDTH = 100.0
PLANE_HEIGHT = 60.0


@dataclass(frozen=True)
class PlaneCoordinate:
    x: float
    y: float
    country: str


CoordinateTable = Mapping[str, PlaneCoordinate]

_REGIONS = {
    # North America
    "New York": PlaneCoordinate(22, 18, "USA"),
    "Los Angeles": PlaneCoordinate(15, 22, "USA"),
    "Chicago": PlaneCoordinate(20, 20, "USA"),
    "Toronto": PlaneCoordinate(21, 17, "Canada"),
    "Vancouver": PlaneCoordinate(15, 15, "Canada"),
    "Mexico City": PlaneCoordinate(18, 30, "Mexico"),
    # Europe
    "London": PlaneCoordinate(48, 16, "UK"),
    "Paris": PlaneCoordinate(50, 18, "France"),
    "Berlin": PlaneCoordinate(52, 15, "Germany"),
    "Madrid": PlaneCoordinate(47, 22, "Spain"),
    "Rome": PlaneCoordinate(52, 24, "Italy"),
    "Amsterdam": PlaneCoordinate(50, 15, "Netherlands"),
    "Vienna": PlaneCoordinate(54, 18, "Austria"),
    "Stockholm": PlaneCoordinate(56, 10, "Sweden"),
    "Moscow": PlaneCoordinate(70, 12, "Russia"),
    # Middle East & North Africa
    "Dubai": PlaneCoordinate(72, 28, "UAE"),
    "Abu Dhabi": PlaneCoordinate(71, 29, "UAE"),
    "Sharjah": PlaneCoordinate(73, 28, "UAE"),
    "Riyadh": PlaneCoordinate(68, 29, "Saudi Arabia"),
    "Jeddah": PlaneCoordinate(65, 31, "Saudi Arabia"),
    "Kuwait City": PlaneCoordinate(69, 26, "Kuwait"),
    "Doha": PlaneCoordinate(70, 28, "Qatar"),
    "Manama": PlaneCoordinate(69, 27, "Bahrain"),
    "Cairo": PlaneCoordinate(60, 25, "Egypt"),
    "Casablanca": PlaneCoordinate(43, 23, "Morocco"),
    # Asia-Pacific
    "Tokyo": PlaneCoordinate(88, 20, "Japan"),
    "Seoul": PlaneCoordinate(84, 18, "South Korea"),
    "Beijing": PlaneCoordinate(80, 17, "China"),
    "Shanghai": PlaneCoordinate(81, 21, "China"),
    "Hong Kong": PlaneCoordinate(79, 27, "Hong Kong"),
    "Mumbai": PlaneCoordinate(74, 32, "India"),
    "Delhi": PlaneCoordinate(75, 26, "India"),
    "Singapore": PlaneCoordinate(79, 42, "Singapore"),
    "Bangkok": PlaneCoordinate(77, 38, "Thailand"),
    "Sydney": PlaneCoordinate(89, 52, "Australia"),
    "Melbourne": PlaneCoordinate(87, 54, "Australia"),
    # South America
    "São Paulo": PlaneCoordinate(33, 47, "Brazil"),
    "Rio de Janeiro": PlaneCoordinate(34, 45, "Brazil"),
    "Buenos Aires": PlaneCoordinate(30, 52, "Argentina"),
    "Lima": PlaneCoordinate(28, 42, "Peru"),
    # Africa
    "Lagos": PlaneCoordinate(51, 38, "Nigeria"),
    "Johannesburg": PlaneCoordinate(62, 48, "South Africa"),
    "Cape Town": PlaneCoordinate(59, 52, "South Africa"),
    "Nairobi": PlaneCoordinate(65, 42, "Kenya"),
}

REGION_COORDINATES: CoordinateTable = MappingProxyType(_REGIONS)


def lookup_region(table: CoordinateTable, region: str) -> Optional[PlaneCoordinate]:
    """Exact-name lookup. Region names are assumed unique across countries."""
    return table.get(region)


def project_lat_lon(latitude: float, longitude: float) -> tuple[float, float]:
    """Equirectangular projection of a lat/lon pair onto the map plane."""
    lat = max(-90.0, min(90.0, latitude))
    lon = max(-180.0, min(180.0, longitude))
    x = (lon + 180.0) / 360.0 * PLANE_WIDTH
    y = (90.0 - lat) / 180.0 * PLANE_HEIGHT
    return x, y
