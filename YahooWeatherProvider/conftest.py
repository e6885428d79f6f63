"""Shared fixtures: sample Yahoo YQL documents."""
import pytest

DEFAULT_FORECASTS = [
    {"code": "30", "low": "12", "high": "21"},
    {"code": "28", "low": "11", "high": "19"},
    {"code": "12", "low": "10", "high": "16"},
    {"code": "32", "low": "9", "high": "20"},
    {"code": "34", "low": "10", "high": "22"},
    {"code": "26", "low": "12", "high": "23"},
]


def _attrs(values):
    return " ".join(f'{key}="{value}"' for key, value in values.items())


def build_forecast_xml(
    city="Sunnyvale",
    units=None,
    wind=None,
    humidity="72",
    condition=None,
    forecasts=None,
):
    units = {"distance": "km", "pressure": "mb", "speed": "km/h", "temperature": "C"} if units is None else units
    wind = {"chill": "61", "direction": "270", "speed": "14.48"} if wind is None else wind
    condition = {"code": "30", "date": "Mon, 17 Oct 2016 11:00 AM PDT", "temp": "17", "text": "Partly Cloudy"} \
        if condition is None else condition
    forecasts = DEFAULT_FORECASTS if forecasts is None else forecasts

    forecast_elements = "\n".join(f"<yweather:forecast {_attrs(day)}/>" for day in forecasts)
    units_element = f"<yweather:units {_attrs(units)}/>" if units else ""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<query xmlns:yahoo="http://www.yahooapis.com/v1/base.rng" yahoo:count="1" yahoo:lang="en-US">
<results>
<channel>
{units_element}
<title>Yahoo! Weather - {city}, CA, US</title>
<yweather:location xmlns:yweather="http://xml.weather.yahoo.com/ns/rss/1.0" city="{city}" country="United States" region=" CA"/>
<yweather:wind xmlns:yweather="http://xml.weather.yahoo.com/ns/rss/1.0" {_attrs(wind)}/>
<yweather:atmosphere xmlns:yweather="http://xml.weather.yahoo.com/ns/rss/1.0" humidity="{humidity}" pressure="1015.0" rising="0" visibility="16.1"/>
<item>
<title>Conditions for {city}, CA, US</title>
<yweather:condition xmlns:yweather="http://xml.weather.yahoo.com/ns/rss/1.0" {_attrs(condition)}/>
{forecast_elements}
<description><![CDATA[<img src="http://l.yimg.com/a/i/us/we/52/30.gif"/>]]></description>
</item>
</channel>
</results>
</query>
"""


@pytest.fixture
def forecast_xml():
    """Factory building a weather.forecast XML document."""
    return build_forecast_xml


@pytest.fixture
def sample_place():
    """A single geo.places entry."""
    return {
        "woeid": "12797130",
        "postal": {"type": "Zip Code", "woeid": "12797130", "content": "94089"},
        "admin1": {"code": "US-CA", "type": "State", "woeid": "2347563", "content": "California"},
        "admin2": {"code": "", "type": "County", "woeid": "12587712", "content": "Santa Clara"},
        "admin3": None,
        "locality1": {"type": "Town", "woeid": "2502265", "content": "Sunnyvale"},
        "locality2": None,
        "country": {"code": "US", "type": "Country", "woeid": "23424977", "content": "United States"},
    }


@pytest.fixture
def places_response(sample_place):
    """geo.places JSON response holding two places."""
    second = {
        "woeid": "2442047",
        "postal": None,
        "admin1": {"code": "US-CA", "type": "State", "woeid": "2347563", "content": "California"},
        "admin2": None,
        "admin3": None,
        "locality1": {"type": "Town", "woeid": "2442047", "content": "Los Angeles"},
        "locality2": None,
        "country": {"code": "US", "type": "Country", "woeid": "23424977", "content": "United States"},
    }
    return {"query": {"count": 2, "results": {"place": [sample_place, second]}}}
