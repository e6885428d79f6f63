"""Streaming parser for Yahoo weather.forecast XML documents."""
import logging
import math
import xml.sax
from typing import List, Optional, Union

from weather_data import DayForecast
from weather_provider import WeatherProviderError

FORECAST_DAYS = 4

# Yahoo reports "not available" with this condition code
CONDITION_NOT_AVAILABLE = 3200


def _to_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _to_int(value: Optional[str], default: int) -> int:
    number = _to_float(value, math.nan)
    if math.isnan(number) or math.isinf(number):
        return default
    return int(number)


class ForecastHandler(xml.sax.ContentHandler):
    """
    Collects attributes from the yweather:* elements of a forecast document.

    Everything else in the document is ignored.
    """

    def __init__(self):
        super().__init__()
        self.city: Optional[str] = None
        self.temperature_unit: Optional[str] = None
        self.speed_unit: Optional[str] = None
        self.wind_direction = -1
        self.wind_speed = -1.0
        self.humidity = -1.0
        self.condition_code = -1
        self.temperature = math.nan
        self.forecasts: List[DayForecast] = []

    def startElement(self, name, attrs):
        if name == "yweather:location":
            self.city = attrs.get("city")
        elif name == "yweather:units":
            self.temperature_unit = attrs.get("temperature")
            self.speed_unit = attrs.get("speed")
        elif name == "yweather:wind":
            self.wind_direction = _to_int(attrs.get("direction"), -1)
            self.wind_speed = _to_float(attrs.get("speed"), -1.0)
        elif name == "yweather:atmosphere":
            self.humidity = _to_float(attrs.get("humidity"), -1.0)
        elif name == "yweather:condition":
            self.condition_code = _to_int(attrs.get("code"), -1)
            self.temperature = _to_float(attrs.get("temp"), math.nan)
        elif name == "yweather:forecast":
            self._add_forecast(attrs)

    def _add_forecast(self, attrs) -> None:
        day = DayForecast(
            condition_code=_to_int(attrs.get("code"), -1),
            low=_to_float(attrs.get("low"), math.nan),
            high=_to_float(attrs.get("high"), math.nan),
        )
        if math.isnan(day.low) or math.isnan(day.high) or day.condition_code < 0:
            logging.debug(f"Skipping unusable forecast entry: {dict(attrs)}")
            return
        if len(self.forecasts) < FORECAST_DAYS:
            self.forecasts.append(day)

    def is_complete(self) -> bool:
        return (
            self.temperature_unit is not None
            and self.speed_unit is not None
            and self.condition_code >= 0
            and not math.isnan(self.temperature)
            and len(self.forecasts) > 0
        )


def parse_forecast(document: Union[bytes, str]) -> ForecastHandler:
    """
    Parse a forecast document.

    Returns:
        ForecastHandler: A complete handler; an unknown current condition has
        already been replaced by the first forecast day's condition.

    Raises:
        WeatherProviderError: If the XML is malformed or incomplete
    """
    handler = ForecastHandler()
    try:
        if isinstance(document, str):
            document = document.encode("utf-8")
        xml.sax.parseString(document, handler)
    except xml.sax.SAXException as e:
        logging.error(f"Could not parse weather XML: {e}")
        raise WeatherProviderError(f"Could not parse weather XML: {e}")

    if not handler.is_complete():
        logging.warning("Received incomplete weather XML")
        raise WeatherProviderError("Incomplete weather XML")

    # Unknown current condition: the first forecast day is a better guess than nothing
    if handler.condition_code == CONDITION_NOT_AVAILABLE:
        handler.condition_code = handler.forecasts[0].condition_code

    return handler
