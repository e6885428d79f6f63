"""Rate limiting for repeated weather requests on the same place."""
import logging
import threading
import time
from typing import Callable, Optional

from weather_data import GeoLocation, WeatherLocation
from weather_provider import RequestInfo, RequestType

# Weather APIs recommend waiting 10 minutes between requests for the same place
REQUEST_THRESHOLD_SECONDS = 10 * 60
# Weather doesn't change much within 5 km
LOCATION_DISTANCE_METERS_THRESHOLD = 5 * 1000.0

WEATHER_REQUEST_TYPES = (RequestType.WEATHER_BY_GEO_LOCATION, RequestType.WEATHER_BY_WEATHER_LOCATION)


class RequestGuard:
    """
    Remembers the last submitted weather request and the last place fetched.

    A request is a duplicate when it targets the last successfully fetched
    place and the previous submission happened less than the threshold ago.
    """

    def __init__(
        self,
        request_threshold_seconds: float = REQUEST_THRESHOLD_SECONDS,
        distance_threshold_meters: float = LOCATION_DISTANCE_METERS_THRESHOLD,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.request_threshold_seconds = request_threshold_seconds
        self.distance_threshold_meters = distance_threshold_meters
        self._clock = clock
        self._lock = threading.Lock()

        self._last_request_timestamp: Optional[float] = None
        self._previous_request_timestamp: Optional[float] = None
        self._last_location: Optional[GeoLocation] = None
        self._last_weather_location: Optional[WeatherLocation] = None

    def is_duplicate(self, request_info: RequestInfo) -> bool:
        with self._lock:
            return self._is_duplicate(request_info)

    def try_submit(self, request_info: RequestInfo) -> bool:
        """
        Check a request and, for weather requests, start a new time window.

        Returns False for duplicates, which leave the guard untouched.
        """
        with self._lock:
            if self._is_duplicate(request_info):
                return False
            if request_info.request_type in WEATHER_REQUEST_TYPES:
                self._previous_request_timestamp = self._last_request_timestamp
                self._last_request_timestamp = self._clock()
            return True

    def revert_submission(self) -> None:
        """Undo the window started by the last try_submit() whose work never ran."""
        with self._lock:
            self._last_request_timestamp = self._previous_request_timestamp

    def record_success(self, request_info: RequestInfo) -> None:
        with self._lock:
            if request_info.request_type == RequestType.WEATHER_BY_WEATHER_LOCATION:
                self._last_weather_location = request_info.weather_location
                self._last_location = None
            elif request_info.request_type == RequestType.WEATHER_BY_GEO_LOCATION:
                self._last_location = request_info.location
                self._last_weather_location = None

    def _submitted_too_soon(self) -> bool:
        if self._last_request_timestamp is None:
            return False
        now = self._clock()
        logging.debug(f"Now {now:.1f}, last request {self._last_request_timestamp:.1f}")
        return self._last_request_timestamp + self.request_threshold_seconds > now

    def _is_same_geo_location(self, location: Optional[GeoLocation]) -> bool:
        if location is None or self._last_location is None:
            return False
        distance = location.distance_to(self._last_location)
        logging.debug(f"Distance between locations {distance:.0f}m")
        return distance < self.distance_threshold_meters

    def _is_same_weather_location(self, weather_location: Optional[WeatherLocation]) -> bool:
        if weather_location is None:
            return False
        return weather_location.same_place(self._last_weather_location)

    def _is_duplicate(self, request_info: RequestInfo) -> bool:
        if request_info.request_type == RequestType.WEATHER_BY_GEO_LOCATION:
            same_place = self._is_same_geo_location(request_info.location)
        elif request_info.request_type == RequestType.WEATHER_BY_WEATHER_LOCATION:
            same_place = self._is_same_weather_location(request_info.weather_location)
        else:
            return False
        return same_place and self._submitted_too_soon()
