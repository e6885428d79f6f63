"""Weather domain model - pure data structures independent of any API."""
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

# Mean Earth radius in meters
EARTH_RADIUS_METERS = 6371008.8


class TempUnit(Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"


class WindSpeedUnit(Enum):
    KPH = "kph"
    MPH = "mph"


@dataclass
class GeoLocation:
    """A point given by latitude/longitude in degrees."""
    latitude: float
    longitude: float

    def distance_to(self, other: "GeoLocation") -> float:
        """Calculate distance in meters using the Haversine formula."""
        lat1 = math.radians(self.latitude)
        lon1 = math.radians(self.longitude)
        lat2 = math.radians(other.latitude)
        lon2 = math.radians(other.longitude)

        dlat = lat2 - lat1
        dlon = lon2 - lon1

        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return EARTH_RADIUS_METERS * c


@dataclass
class WeatherLocation:
    """A named place known to the weather API (city_id is the Yahoo WOEID)."""
    city_id: str
    city: str
    postal_code: Optional[str] = None
    country: Optional[str] = None
    country_id: Optional[str] = None

    def same_place(self, other: Optional["WeatherLocation"]) -> bool:
        if other is None:
            return False
        return (
            self.city_id == other.city_id
            and self.city == other.city
            and self.postal_code == other.postal_code
            and self.country == other.country
            and self.country_id == other.country_id
        )


@dataclass
class DayForecast:
    condition_code: int
    low: float
    high: float


@dataclass
class WeatherInfo:
    """Domain model for a weather reading, independent of any specific API."""
    city: str
    temperature: float
    temperature_unit: TempUnit
    humidity: float
    wind_speed: float
    wind_direction: int
    wind_speed_unit: WindSpeedUnit
    todays_low: float
    todays_high: float
    condition_code: int
    forecasts: List[DayForecast] = field(default_factory=list)
    timestamp: float = field(default_factory=time.time)  # UNIX time of the local fetch
