"""Submit a single request to the provider service from the command line."""
import argparse
import logging
import threading
from typing import Optional

from config import load_settings, setup_logging
from weather_data import GeoLocation, WeatherLocation
from weather_provider import (
    RequestInfo,
    RequestStatus,
    RequestType,
    ServiceRequest,
    ServiceRequestResult,
)
from weather_service import YahooWeatherProviderService
from yahoo_weather_provider import YahooWeatherProvider


class ConsoleRequest(ServiceRequest):
    """Stand-in for the host's request object; records and logs the outcome."""

    def __init__(self, request_info: RequestInfo):
        super().__init__(request_info)
        self.status: Optional[RequestStatus] = None
        self.result: Optional[ServiceRequestResult] = None
        self.done = threading.Event()

    def complete(self, result: ServiceRequestResult) -> None:
        self.result = result
        self._finish(RequestStatus.COMPLETED)

    def fail(self) -> None:
        self._finish(RequestStatus.FAILED)

    def reject(self, status: RequestStatus) -> None:
        self._finish(status)

    def _finish(self, status: RequestStatus) -> None:
        self.status = status
        logging.info("Request finished with status %s", status.name)
        self.done.set()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser("Yahoo weather provider harness")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--city", help="Look up places matching a city name")
    target.add_argument("--woeid", help="Fetch weather for a Yahoo place id")
    target.add_argument("--coords", nargs=2, type=float, metavar=("LAT", "LON"),
                        help="Fetch weather for a coordinate pair")
    parser.add_argument("--name", default="", help="City name to report with --woeid")
    parser.add_argument("--wait", type=float, default=30.0, help="Seconds to wait for the result")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


def build_request_info(args: argparse.Namespace) -> RequestInfo:
    if args.city:
        return RequestInfo(RequestType.LOOKUP_CITY_NAME, city_name=args.city)
    if args.woeid:
        return RequestInfo(
            RequestType.WEATHER_BY_WEATHER_LOCATION,
            weather_location=WeatherLocation(city_id=args.woeid, city=args.name),
        )
    lat, lon = args.coords
    return RequestInfo(RequestType.WEATHER_BY_GEO_LOCATION, location=GeoLocation(lat, lon))


def print_result(request: ConsoleRequest) -> None:
    if request.status != RequestStatus.COMPLETED or request.result is None:
        print(f"Request {request.status.name if request.status else 'TIMED OUT'}")
        return

    weather = request.result.weather_info
    if weather is not None:
        print(f"{weather.city}: {weather.temperature}° ({weather.temperature_unit.name}) "
              f"code {weather.condition_code}, humidity {weather.humidity}%, "
              f"wind {weather.wind_speed} {weather.wind_speed_unit.name}")
        for day in weather.forecasts:
            print(f"  low {day.low} high {day.high} code {day.condition_code}")
        return

    for location in request.result.locations:
        print(f"{location.city_id}\t{location.city}\t{location.country or ''} ({location.country_id})")


def main() -> None:
    args = parse_args()
    setup_logging(args.log_file, args.verbose)
    settings = load_settings()

    provider = YahooWeatherProvider(lang=settings.lang, units=settings.units, timeout=settings.timeout)
    service = YahooWeatherProviderService(provider, max_workers=settings.max_workers)

    request = ConsoleRequest(build_request_info(args))
    try:
        service.on_request_submitted(request)
        if not request.done.wait(args.wait):
            logging.warning("No answer after %ss, cancelling", args.wait)
            service.on_request_cancelled(request)
    except KeyboardInterrupt:
        logging.info("Interrupted, cancelling request")
        service.on_request_cancelled(request)
    finally:
        service.shutdown(wait=False)

    print_result(request)


if __name__ == "__main__":
    main()
