"""Open-Meteo weather data collector.

Fetches historical daily temperatures from the Open-Meteo Archive API for
correlation with electricity usage.
"""

import logging
from datetime import date

import httpx

from ..models import DailyWeather

logger = logging.getLogger(__name__)

API_BASE_URL = "https://archive-api.open-meteo.com/v1/archive"
DEFAULT_TIMEZONE = "America/Los_Angeles"

# Service-area zip codes; anything else falls back to Seattle
ZIP_TO_COORDS: dict[str, tuple[float, float]] = {
    "98011": (47.76, -122.21),  # Bothell
    "98012": (47.84, -122.23),  # Bothell
    "98021": (47.79, -122.24),  # Bothell
    "98052": (47.68, -122.12),  # Redmond
    "98053": (47.68, -122.02),  # Redmond
    "98004": (47.62, -122.21),  # Bellevue
    "98005": (47.61, -122.17),  # Bellevue
    "98006": (47.55, -122.15),  # Bellevue
    "98007": (47.62, -122.14),  # Bellevue
    "98008": (47.61, -122.10),  # Bellevue
    "98033": (47.68, -122.19),  # Kirkland
    "98034": (47.72, -122.21),  # Kirkland
    "98101": (47.61, -122.33),  # Seattle
    "98103": (47.67, -122.34),  # Seattle
    "98105": (47.66, -122.29),  # Seattle
    "98115": (47.69, -122.28),  # Seattle
    "98122": (47.61, -122.30),  # Seattle
    "98125": (47.72, -122.31),  # Seattle
    "98133": (47.74, -122.34),  # Seattle
    "98155": (47.76, -122.32),  # Shoreline
    "98177": (47.76, -122.37),  # Seattle
    "98028": (47.76, -122.25),  # Kenmore
    "98072": (47.76, -122.14),  # Woodinville
    "98077": (47.74, -122.05),  # Woodinville
    "98074": (47.63, -122.05),  # Sammamish
    "98075": (47.59, -122.04),  # Sammamish
}
DEFAULT_COORDS = (47.61, -122.33)


class WeatherError(Exception):
    """Raised when weather data can't be fetched."""
    pass


def get_coordinates(zip_code: str | None) -> tuple[float, float]:
    """(latitude, longitude) for a zip code, defaulting to Seattle."""
    if zip_code is None:
        return DEFAULT_COORDS
    return ZIP_TO_COORDS.get(zip_code, DEFAULT_COORDS)


def fetch_daily_weather(
    latitude: float,
    longitude: float,
    start_date: date,
    end_date: date,
) -> list[DailyWeather]:
    """Fetch daily max/min/mean temperatures (°F) from Open-Meteo.

    Args:
        latitude: Location latitude
        longitude: Location longitude
        start_date: First day to fetch
        end_date: Last day to fetch (inclusive)

    Returns:
        List of DailyWeather, skipping days without a mean temperature

    Note:
        The Archive API has a 5-7 day delay, so the last few days of a
        recent export will usually have no weather.
    """
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "daily": "temperature_2m_max,temperature_2m_min,temperature_2m_mean",
        "temperature_unit": "fahrenheit",
        "timezone": DEFAULT_TIMEZONE,
    }

    try:
        response = httpx.get(API_BASE_URL, params=params, timeout=30.0)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise WeatherError(f"Weather API error: {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise WeatherError(f"Failed to fetch weather data: {e}") from e

    daily = response.json().get("daily") or {}
    times = daily.get("time", [])
    maxes = daily.get("temperature_2m_max", [])
    mins = daily.get("temperature_2m_min", [])
    means = daily.get("temperature_2m_mean", [])

    weather = []
    for day, t_max, t_min, t_mean in zip(times, maxes, mins, means):
        if t_mean is None:  # Skip missing values
            continue
        weather.append(
            DailyWeather(
                date=date.fromisoformat(day),
                temp_max=float(t_max if t_max is not None else t_mean),
                temp_min=float(t_min if t_min is not None else t_mean),
                temp_mean=float(t_mean),
            )
        )

    logger.info("Fetched %d days of weather for %.2f,%.2f", len(weather), latitude, longitude)
    return weather


def fetch_weather_for_zip(
    zip_code: str | None, start_date: date, end_date: date
) -> list[DailyWeather]:
    """Fetch daily weather for the location of a zip code."""
    latitude, longitude = get_coordinates(zip_code)
    return fetch_daily_weather(latitude, longitude, start_date, end_date)
