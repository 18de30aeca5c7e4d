"""
Remote feeds polled by kiosk widgets, all routed through RemoteDataCache.
"""

import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from src.common.logger import setup_logger
from .models import CustomWidgetDefinition, WeatherConfig
from .remote_cache import RemoteDataCache

logger = setup_logger(__name__)

WEATHER_API_URL = "https://api.open-meteo.com/v1/forecast"
WEATHER_TTL = 900          # 15 minutes
APOD_URL = "https://api.nasa.gov/planetary/apod?api_key=DEMO_KEY"
APOD_TTL = 3600
CUSTOM_WIDGET_TTL = 60

_PATH_TOKEN = re.compile(r"[^.\[\]]+|\[(\d+)\]")
_MISSING = object()


def weather_url(weather: WeatherConfig) -> str:
    """Build the Open-Meteo daily forecast URL for a location."""
    params = {
        "latitude": weather.lat,
        "longitude": weather.lon,
        "daily": "temperature_2m_max,temperature_2m_min,weathercode",
        "current_weather": "true",
        "temperature_unit": "fahrenheit",
        "timezone": "auto",
    }
    return f"{WEATHER_API_URL}?{urlencode(params, safe=',')}"


def fetch_weather(cache: RemoteDataCache, weather: WeatherConfig) -> Optional[Dict[str, Any]]:
    """Get the forecast for a location, cached per city."""
    return cache.fetch(f"weather_widget_{weather.city}", weather_url(weather), WEATHER_TTL)


def summarize_forecast(data: Dict[str, Any], days: int = 3) -> List[Dict[str, Any]]:
    """
    Reduce an Open-Meteo response to per-day rows.

    Returns:
        List of {date, max, min, code} dicts, at most `days` long
    """
    daily = (data or {}).get("daily") or {}
    dates = daily.get("time") or []
    highs = daily.get("temperature_2m_max") or []
    lows = daily.get("temperature_2m_min") or []
    codes = daily.get("weathercode") or []

    rows = []
    for i, date in enumerate(dates[:days]):
        try:
            rows.append({
                "date": date,
                "max": round(highs[i]),
                "min": round(lows[i]),
                "code": codes[i],
            })
        except (IndexError, TypeError):
            logger.warning("Incomplete forecast row for %s", date)
            break
    return rows


def fetch_apod(cache: RemoteDataCache) -> Optional[Dict[str, Any]]:
    """Get NASA's astronomy picture of the day."""
    return cache.fetch("nasa_apod", APOD_URL, APOD_TTL)


def resolve_json_path(data: Any, path: str, default: Any = None) -> Any:
    """
    Look up a dotted path with optional list indices.

    Example:
        >>> resolve_json_path({"bpi": {"USD": {"rate": "1.0"}}}, "bpi.USD.rate")
        '1.0'
        >>> resolve_json_path({"items": [{"v": 3}]}, "items[0].v")
        3
    """
    if not path:
        return default

    current = data
    for match in _PATH_TOKEN.finditer(path):
        index, name = match.group(1), match.group(0)
        if index is not None:
            if not isinstance(current, list):
                return default
            position = int(index)
            if position >= len(current):
                return default
            current = current[position]
        elif isinstance(current, dict):
            current = current.get(name, _MISSING)
            if current is _MISSING:
                return default
        elif isinstance(current, list) and name.isdigit() and int(name) < len(current):
            current = current[int(name)]
        else:
            return default
    return current


def format_widget_value(definition: CustomWidgetDefinition, value: Any) -> str:
    return f"{definition.prefix or ''}{value}{definition.suffix or ''}"


def fetch_custom_widget(cache: RemoteDataCache, definition: CustomWidgetDefinition) -> Optional[str]:
    """
    Poll an operator-defined endpoint and extract its display value.

    Returns:
        "prefix + value + suffix", or None if no endpoint, no data or no value at jsonPath
    """
    if not definition.endpoint:
        return None

    data = cache.fetch(
        f"custom_widget_{definition.id}",
        definition.endpoint,
        definition.refresh_seconds or CUSTOM_WIDGET_TTL,
    )
    if data is None or not definition.json_path:
        return None

    value = resolve_json_path(data, definition.json_path, _MISSING)
    if value is _MISSING or value is None:
        return None
    return format_widget_value(definition, value)
