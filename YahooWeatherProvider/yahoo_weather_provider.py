"""Yahoo YQL weather and place-search client."""
import html
import logging
from typing import Any, Dict, List, Optional

import requests

from forecast_parser import parse_forecast
from weather_data import GeoLocation, TempUnit, WeatherInfo, WeatherLocation, WindSpeedUnit
from weather_provider import WeatherProviderError


class YahooWeatherProvider:
    """
    Weather client for the Yahoo YQL public endpoint.

    Forecasts are fetched as XML from the weather.forecast table; places are
    resolved as JSON from the geo.places table.
    """

    BASE_URL = "https://query.yahooapis.com/v1/public/yql"

    WEATHER_QUERY = "select * from weather.forecast where woeid = {woeid} and u= '{unit}'"
    LOCATION_QUERY = (
        "select woeid, postal, admin1, admin2, admin3, locality1, locality2, country "
        "from geo.places where (placetype = 7 or placetype = 8 or placetype = 9 "
        "or placetype = 10 or placetype = 11 or placetype = 20) "
        "and text =\"{text}\" and lang = \"{lang}\""
    )
    PLACEFINDER_QUERY = "select * from geo.places where text =\"({lat:f},{lon:f})\" and lang=\"{lang}\""

    # Most specific first
    LOCALITY_NAMES = ("locality1", "locality2", "admin3", "admin2", "admin1")

    def __init__(self, lang: str = "en", units: str = "metric", timeout: int = 10):
        """
        Initialize Yahoo weather provider.

        Args:
            lang: Language code for place names (e.g., "en", "de-DE")
            units: "metric" (Celsius) or "imperial" (Fahrenheit)
            timeout: HTTP request timeout in seconds
        """
        self.lang = lang
        self.units = units
        self.timeout = timeout

    @property
    def metric(self) -> bool:
        return self.units == "metric"

    def get_weather_by_location(self, weather_location: WeatherLocation) -> WeatherInfo:
        """Fetch weather for a place already known by its WOEID."""
        return self.get_weather(weather_location.city_id, weather_location.city)

    def get_weather_by_geo_location(self, location: GeoLocation) -> WeatherInfo:
        """
        Resolve coordinates to a place through the placefinder, then fetch its weather.

        Raises:
            WeatherProviderError: If the place can't be resolved or the fetch fails
        """
        query = self.PLACEFINDER_QUERY.format(
            lat=location.latitude, lon=location.longitude, lang=self.lang
        )
        results = self._fetch_results(query)

        place = results.get("place")
        if isinstance(place, list):
            place = place[0] if place else None
        if not isinstance(place, dict):
            raise WeatherProviderError(f"Received malformed placefinder data for {location}")

        weather_location = self.parse_place(place)
        if weather_location is None:
            raise WeatherProviderError(f"Can not resolve place name for {location}")

        # The city name in the placefinder result is HTML encoded
        city = html.unescape(weather_location.city)
        logging.debug(f"Resolved location {location} to {city} ({weather_location.city_id})")

        return self.get_weather(weather_location.city_id, city)

    def get_weather(self, woeid: str, localized_city_name: Optional[str] = None) -> WeatherInfo:
        """
        Fetch and parse the forecast document for a WOEID.

        Returns:
            WeatherInfo: Current conditions plus up to four forecast days

        Raises:
            WeatherProviderError: If the request fails or the document is incomplete
        """
        query = self.WEATHER_QUERY.format(woeid=woeid, unit="c" if self.metric else "f")
        document = self._fetch("xml", query)

        try:
            handler = parse_forecast(document)
        except WeatherProviderError as e:
            raise WeatherProviderError(f"{e} (id={woeid})")

        city = localized_city_name if localized_city_name is not None else handler.city
        if city is None:
            raise WeatherProviderError(f"No city name for id={woeid}")

        today = handler.forecasts[0]
        weather_info = WeatherInfo(
            city=city,
            temperature=handler.temperature,
            temperature_unit=TempUnit.CELSIUS if self.metric else TempUnit.FAHRENHEIT,
            humidity=handler.humidity,
            wind_speed=handler.wind_speed,
            wind_direction=handler.wind_direction,
            wind_speed_unit=WindSpeedUnit.KPH if handler.speed_unit == "km/h" else WindSpeedUnit.MPH,
            todays_low=today.low,
            todays_high=today.high,
            condition_code=handler.condition_code,
            forecasts=list(handler.forecasts),
        )

        logging.info(
            f"Weather updated: {weather_info.city} {weather_info.temperature}"
            f" code={weather_info.condition_code} days={len(weather_info.forecasts)}"
        )
        return weather_info

    def lookup_city(self, name: str) -> List[WeatherLocation]:
        """
        Search places matching a city name.

        Raises:
            WeatherProviderError: If the request fails or the response is malformed
        """
        query = self.LOCATION_QUERY.format(text=name, lang=self.lang)
        results = self._fetch_results(query)

        places = results.get("place")
        # A single match comes back as an object instead of an array
        if isinstance(places, dict):
            places = [places]
        if not isinstance(places, list):
            raise WeatherProviderError("Received malformed location lookup data")

        locations = []
        for place in places:
            if not isinstance(place, dict):
                continue
            weather_location = self.parse_place(place)
            if weather_location is not None:
                locations.append(weather_location)

        logging.info(f"Location lookup for '{name}' returned {len(locations)} result(s)")
        return locations

    @classmethod
    def parse_place(cls, place: Dict[str, Any]) -> Optional[WeatherLocation]:
        """Map a geo.places entry to a WeatherLocation, or None if it lacks id, city or country."""
        country = place.get("country")
        if not isinstance(country, dict):
            country = {}

        result_id = place.get("woeid")
        result_city = None
        for name in cls.LOCALITY_NAMES:
            locality = place.get(name)
            if isinstance(locality, dict):
                result_city = locality.get("content")
                if locality.get("woeid"):
                    result_id = locality["woeid"]
                break

        postal = place.get("postal")
        postal_code = postal.get("content") if isinstance(postal, dict) else None

        logging.debug(
            f"Place data -> id={result_id}, city={result_city}, country={country.get('code')}"
        )

        if not result_id or not result_city or not country.get("code"):
            return None

        return WeatherLocation(
            city_id=str(result_id),
            city=result_city,
            postal_code=postal_code,
            country=country.get("content"),
            country_id=country["code"],
        )

    def _fetch_results(self, query: str) -> Dict[str, Any]:
        """Run a JSON query and unwrap query.results."""
        response = self._get("json", query)
        try:
            data = response.json()
            results = data["query"]["results"]
        except (KeyError, TypeError, ValueError) as e:
            logging.error(f"Received malformed places data: {e}")
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

        if not isinstance(results, dict):
            raise WeatherProviderError("Response has no results")
        return results

    def _fetch(self, response_format: str, query: str) -> bytes:
        return self._get(response_format, query).content

    def _get(self, response_format: str, query: str) -> requests.Response:
        params = {"format": response_format, "q": query}
        try:
            logging.debug(f"Making YQL request: {self.BASE_URL} q={query}")
            response = requests.get(self.BASE_URL, params=params, timeout=self.timeout)
            logging.debug(f"API response status: {response.status_code}")
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise WeatherProviderError(f"Network error: {str(e)}")

        if not response.ok:
            logging.error(f"API request failed with status {response.status_code}")
            self._handle_error_response(response)
        return response

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from a YQL error response."""
        try:
            error_data = response.json()
            description = error_data.get("error", {}).get("description", "Unknown error")
            logging.error(f"YQL error response: {error_data}")
            raise WeatherProviderError(f"Yahoo API error {response.status_code}: {description}")
        except (ValueError, AttributeError):
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise WeatherProviderError(
                f"HTTP {response.status_code}: {response.text[:200]}"
            )
