"""Weather provider plugin contract - the objects the host hands to a provider."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from weather_data import GeoLocation, WeatherInfo, WeatherLocation


class RequestType(Enum):
    WEATHER_BY_GEO_LOCATION = 1
    WEATHER_BY_WEATHER_LOCATION = 2
    LOOKUP_CITY_NAME = 3


class RequestStatus(Enum):
    COMPLETED = 1
    FAILED = -1
    SUBMITTED_TOO_SOON = -2


@dataclass
class RequestInfo:
    request_type: RequestType
    location: Optional[GeoLocation] = None
    weather_location: Optional[WeatherLocation] = None
    city_name: Optional[str] = None


@dataclass
class ServiceRequestResult:
    """Payload handed back to the host: a weather reading or a list of places."""
    weather_info: Optional[WeatherInfo] = None
    locations: List[WeatherLocation] = field(default_factory=list)

    @classmethod
    def of(cls, payload: Union[WeatherInfo, List[WeatherLocation]]) -> "ServiceRequestResult":
        if isinstance(payload, WeatherInfo):
            return cls(weather_info=payload)
        return cls(locations=list(payload))


class ServiceRequest(ABC):
    """
    A request submitted by the host.

    Instances are compared by identity so they can key the in-flight task tables.
    """

    def __init__(self, request_info: RequestInfo):
        self.request_info = request_info

    @abstractmethod
    def complete(self, result: ServiceRequestResult) -> None:
        pass

    @abstractmethod
    def fail(self) -> None:
        pass

    @abstractmethod
    def reject(self, status: RequestStatus) -> None:
        pass


class WeatherProviderServiceBase(ABC):
    """Abstract base class for provider plugins loaded by the host."""

    @abstractmethod
    def on_request_submitted(self, request: ServiceRequest) -> None:
        """
        Handle a new request from the host.

        The provider must eventually call exactly one of complete(), fail()
        or reject() on the request unless the host cancels it first.
        """
        pass

    @abstractmethod
    def on_request_cancelled(self, request: ServiceRequest) -> None:
        """Stop work on a previously submitted request."""
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""
    pass
