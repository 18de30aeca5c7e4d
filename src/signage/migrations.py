"""
Validation and schema migration for the persisted configuration blob.

Migrations are named, ordered steps. Each step is a pure function from the
parsed mapping to a new mapping and is safe to apply more than once, so a
blob written by any older release upgrades to the current shape on read.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Sequence, TypeVar

from .defaults import (
    DEFAULT_EMERGENCY,
    DEFAULT_EVENT_CATEGORIES,
    DEFAULT_LIVE_CAM_URLS,
    DEFAULT_PAGE_DURATION,
    DEFAULT_SOCIALS,
    DEFAULT_THEME,
    DEFAULT_TICKER_ITEMS,
    DEFAULT_WEATHER_CONFIG,
)
from .models import AppConfiguration, DEFAULT_PAGE_TYPE, PAGE_TYPES

T = TypeVar("T")

REQUIRED_FIELDS = ("pages", "theme", "schoolName")
OBSOLETE_FIELDS = ("liveCamUrl", "homeLayout", "homeWidgets")
VOLATILE_FIELDS = ("isSafeMode",)


@dataclass
class Result(Generic[T]):
    """Outcome of a step that may fail with a corruption reason."""

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, reason: str) -> "Result[T]":
        return cls(error=reason)


@dataclass(frozen=True)
class Migration:
    """A named backward-compatibility step."""

    name: str
    apply: Callable[[Dict[str, Any]], Dict[str, Any]]


def _is_present(value: Any) -> bool:
    # Empty lists and dicts count as present; null, empty strings and false do not
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def validate_structure(raw: Any) -> Result[Dict[str, Any]]:
    """
    Check that a parsed blob has the fields every surface depends on.

    An empty `pages` list is accepted; a missing one is not.
    """
    if not isinstance(raw, dict):
        return Result.failure(f"Configuration root must be an object, got {type(raw).__name__}")

    missing = [name for name in REQUIRED_FIELDS if not _is_present(raw.get(name))]
    if missing:
        return Result.failure(
            "Configuration structure is incomplete or corrupted "
            f"(missing: {', '.join(missing)})"
        )

    if not isinstance(raw["pages"], list):
        return Result.failure("Configuration field 'pages' must be a list")
    if not isinstance(raw["theme"], dict):
        return Result.failure("Configuration field 'theme' must be an object")

    return Result.success(raw)


def _fill(key: str, default_factory: Callable[[], Any], when: Callable[[Any], bool]):
    def step(data: Dict[str, Any]) -> Dict[str, Any]:
        if not when(data.get(key)):
            return data
        migrated = dict(data)
        migrated[key] = default_factory()
        return migrated
    return step


def _missing(value: Any) -> bool:
    return value is None


def _falsy(value: Any) -> bool:
    return not _is_present(value)


def split_live_cam_url(data: Dict[str, Any]) -> Dict[str, Any]:
    """Replace the singular `liveCamUrl` with the `liveCamUrls` list."""
    if _is_present(data.get("liveCamUrls")):
        return data
    migrated = dict(data)
    legacy = data.get("liveCamUrl")
    migrated["liveCamUrls"] = [legacy] if legacy else list(DEFAULT_LIVE_CAM_URLS)
    return migrated


def drop_fields(names: Sequence[str]) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    def step(data: Dict[str, Any]) -> Dict[str, Any]:
        if not any(name in data for name in names):
            return data
        return {k: v for k, v in data.items() if k not in names}
    return step


def normalize_page_types(data: Dict[str, Any]) -> Dict[str, Any]:
    """Give every page a known `type`, defaulting to "standard"."""
    migrated = dict(data)
    migrated["pages"] = [
        dict(page, type=page.get("type") if page.get("type") in PAGE_TYPES else DEFAULT_PAGE_TYPE)
        for page in data.get("pages") or []
        if isinstance(page, dict)
    ]
    return migrated


MIGRATIONS = (
    Migration("fill_theme", _fill("theme", lambda: dict(DEFAULT_THEME), _falsy)),
    Migration("fill_ticker_items", _fill("tickerItems", lambda: list(DEFAULT_TICKER_ITEMS), _falsy)),
    Migration("fill_live_cam_flag", _fill("enableLiveCam", lambda: False, _missing)),
    Migration("fill_page_duration", _fill("pageDuration", lambda: DEFAULT_PAGE_DURATION, _missing)),
    Migration("split_live_cam_url", split_live_cam_url),
    Migration("drop_obsolete_fields", drop_fields(OBSOLETE_FIELDS)),
    Migration("normalize_page_types", normalize_page_types),
    Migration("fill_socials", _fill("socials", lambda: dict(DEFAULT_SOCIALS), _missing)),
    Migration("fill_emergency", _fill("emergency", lambda: dict(DEFAULT_EMERGENCY), _missing)),
    Migration("fill_weather_config", _fill("weatherConfig", lambda: dict(DEFAULT_WEATHER_CONFIG), _missing)),
    Migration("fill_event_categories", _fill(
        "eventCategories", lambda: [dict(c) for c in DEFAULT_EVENT_CATEGORIES], _falsy)),
    Migration("fill_custom_widgets", _fill("customWidgets", list, _falsy)),
    Migration("drop_volatile_fields", drop_fields(VOLATILE_FIELDS)),
)


def apply_migrations(
    raw: Dict[str, Any],
    migrations: Sequence[Migration] = MIGRATIONS,
) -> Dict[str, Any]:
    """
    Run migration steps in order.

    Args:
        raw: Validated configuration mapping (not modified)
        migrations: Steps to run, in order

    Returns:
        Migrated mapping in the current schema
    """
    data = raw
    for migration in migrations:
        data = migration.apply(data)
    return data


def parse_configuration(blob: str) -> Result[AppConfiguration]:
    """
    Parse, validate and migrate a stored blob.

    Args:
        blob: Raw JSON text from storage

    Returns:
        Result holding the configuration, or the corruption reason
    """
    try:
        raw = json.loads(blob)
    except (TypeError, ValueError, RecursionError) as e:
        return Result.failure(f"Stored configuration is not valid JSON: {e}")

    validated = validate_structure(raw)
    if not validated.ok:
        return Result.failure(validated.error)

    try:
        migrated = apply_migrations(validated.value)
        config = AppConfiguration.from_dict(migrated)
    except (AttributeError, KeyError, TypeError, ValueError, OverflowError, RecursionError) as e:
        return Result.failure(f"Stored configuration could not be migrated: {e}")

    config.is_safe_mode = False
    return Result.success(config)
