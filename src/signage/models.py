"""
Data model for the signage configuration and log records.

Attributes are snake_case; to_dict()/from_dict() use the camelCase names of
the persisted JSON blob.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PAGE_TYPES = ("standard", "grid")
DEFAULT_PAGE_TYPE = "standard"

LOG_LEVELS = ("info", "warn", "error")
LOGIN_REASONS = ("invalid_email_domain", "wrong_passcode", "success", "unknown")


def generate_id() -> str:
    """Generate a fresh entity id. Ids are random and never reused."""
    return uuid.uuid4().hex[:12]


def _without_none(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop optional keys that are unset."""
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class Theme:
    """Visual theme applied to kiosk and admin surfaces."""

    id: str
    name: str
    gradient_start: str
    gradient_end: str
    accent_color: str
    text_color: str
    logo_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            "id": self.id,
            "name": self.name,
            "gradientStart": self.gradient_start,
            "gradientEnd": self.gradient_end,
            "accentColor": self.accent_color,
            "textColor": self.text_color,
            "logoUrl": self.logo_url,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Theme":
        return cls(
            id=str(data.get("id") or generate_id()),
            name=data.get("name", ""),
            gradient_start=data.get("gradientStart", "#000000"),
            gradient_end=data.get("gradientEnd", "#000000"),
            accent_color=data.get("accentColor", "#ffffff"),
            text_color=data.get("textColor", "#ffffff"),
            logo_url=data.get("logoUrl"),
        )


@dataclass
class Announcement:
    """A text or image announcement shown in the kiosk rotation."""

    id: str
    title: str
    content: str
    type: str = "text"  # "text" or "image"
    image_url: Optional[str] = None
    active: bool = True
    priority: str = "normal"  # "low", "normal" or "high"

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "content": self.content,
            "imageUrl": self.image_url,
            "active": self.active,
            "priority": self.priority,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Announcement":
        return cls(
            id=str(data.get("id") or generate_id()),
            type=data.get("type", "text"),
            title=data.get("title", ""),
            content=data.get("content", ""),
            image_url=data.get("imageUrl"),
            active=data.get("active", True),
            priority=data.get("priority", "normal"),
        )


@dataclass
class CategoryDefinition:
    """Event category with its display icon name."""

    id: str
    name: str
    icon: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "icon": self.icon}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryDefinition":
        return cls(
            id=str(data.get("id") or generate_id()),
            name=data.get("name", ""),
            icon=data.get("icon", ""),
        )


@dataclass
class Event:
    """Calendar event. `date` is an ISO-8601 string, `time` a display string."""

    id: str
    title: str
    time: str = ""
    location: str = ""
    date: str = ""
    category: str = "General"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "time": self.time,
            "location": self.location,
            "date": self.date,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            id=str(data.get("id") or generate_id()),
            title=data.get("title", ""),
            time=data.get("time", ""),
            location=data.get("location", ""),
            date=data.get("date", ""),
            category=data.get("category", "General"),
        )


@dataclass
class GridItemConfig:
    """Placement of one widget cell on a grid page."""

    i: str
    x: int
    y: int
    w: int
    h: int

    def to_dict(self) -> Dict[str, Any]:
        return {"i": self.i, "x": self.x, "y": self.y, "w": self.w, "h": self.h}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridItemConfig":
        return cls(
            i=str(data.get("i", "")),
            x=int(data.get("x", 0)),
            y=int(data.get("y", 0)),
            w=int(data.get("w", 1)),
            h=int(data.get("h", 1)),
        )


@dataclass
class WidgetConfig:
    """A widget placed on a grid page."""

    id: str
    type: str
    refresh_seconds: int = 60
    title: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "refreshSeconds": self.refresh_seconds,
            "settings": self.settings,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WidgetConfig":
        return cls(
            id=str(data.get("id") or generate_id()),
            type=data.get("type", "text"),
            refresh_seconds=int(data.get("refreshSeconds", 60)),
            title=data.get("title"),
            settings=data.get("settings"),
        )


@dataclass
class Page:
    """A kiosk page: markdown content ("standard") or a widget grid ("grid")."""

    id: str
    title: str
    type: str = DEFAULT_PAGE_TYPE
    content: Optional[str] = None
    image_url: Optional[str] = None
    layout: Optional[List[GridItemConfig]] = None
    widgets: Optional[Dict[str, WidgetConfig]] = None
    duration: Optional[int] = None
    enabled: Optional[bool] = None

    @property
    def is_enabled(self) -> bool:
        """Pages without an explicit flag are shown."""
        return self.enabled is not False

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "content": self.content,
            "imageUrl": self.image_url,
            "layout": [item.to_dict() for item in self.layout] if self.layout is not None else None,
            "widgets": (
                {key: widget.to_dict() for key, widget in self.widgets.items()}
                if self.widgets is not None else None
            ),
            "duration": self.duration,
            "enabled": self.enabled,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Page":
        layout = data.get("layout")
        widgets = data.get("widgets")
        return cls(
            id=str(data.get("id") or generate_id()),
            title=data.get("title", ""),
            type=data.get("type") or DEFAULT_PAGE_TYPE,
            content=data.get("content"),
            image_url=data.get("imageUrl"),
            layout=[GridItemConfig.from_dict(item) for item in layout] if layout is not None else None,
            widgets=(
                {key: WidgetConfig.from_dict(value) for key, value in widgets.items()}
                if widgets is not None else None
            ),
            duration=data.get("duration"),
            enabled=data.get("enabled"),
        )


@dataclass
class CustomWidgetDefinition:
    """Operator-defined widget that polls a JSON endpoint and shows one value."""

    id: str
    name: str
    endpoint: str
    json_path: str
    refresh_seconds: int = 60
    prefix: Optional[str] = None
    suffix: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            "id": self.id,
            "name": self.name,
            "endpoint": self.endpoint,
            "jsonPath": self.json_path,
            "refreshSeconds": self.refresh_seconds,
            "prefix": self.prefix,
            "suffix": self.suffix,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomWidgetDefinition":
        return cls(
            id=str(data.get("id") or generate_id()),
            name=data.get("name", ""),
            endpoint=data.get("endpoint", ""),
            json_path=data.get("jsonPath", ""),
            refresh_seconds=int(data.get("refreshSeconds") or 60),
            prefix=data.get("prefix"),
            suffix=data.get("suffix"),
        )


@dataclass
class Socials:
    """Contact and social handles shown in the kiosk footer."""

    phone: str = ""
    website: str = ""
    instagram: str = ""
    twitter: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phone": self.phone,
            "website": self.website,
            "instagram": self.instagram,
            "twitter": self.twitter,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Socials":
        return cls(
            phone=data.get("phone", ""),
            website=data.get("website", ""),
            instagram=data.get("instagram", ""),
            twitter=data.get("twitter", ""),
        )


@dataclass
class EmergencyAlert:
    """Full-screen emergency alert state."""

    active: bool = False
    message: str = ""
    timestamp: int = 0
    include_siren: bool = False
    audio_data: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            "active": self.active,
            "message": self.message,
            "timestamp": self.timestamp,
            "includeSiren": self.include_siren,
            "audioData": self.audio_data,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmergencyAlert":
        return cls(
            active=bool(data.get("active", False)),
            message=data.get("message", ""),
            timestamp=data.get("timestamp", 0),
            include_siren=bool(data.get("includeSiren", False)),
            audio_data=data.get("audioData"),
        )


@dataclass
class WeatherConfig:
    """Location used by the weather widget."""

    city: str
    lat: float
    lon: float

    def to_dict(self) -> Dict[str, Any]:
        return {"city": self.city, "lat": self.lat, "lon": self.lon}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherConfig":
        return cls(
            city=data.get("city", ""),
            lat=float(data.get("lat", 0.0)),
            lon=float(data.get("lon", 0.0)),
        )


@dataclass
class AppConfiguration:
    """
    Canonical application state shared by the kiosk and the admin editor.

    is_safe_mode is volatile: it is computed on load and never persisted.
    """

    school_name: str
    theme: Theme
    pages: List[Page]
    announcements: List[Announcement] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    event_categories: List[CategoryDefinition] = field(default_factory=list)
    ticker_items: List[str] = field(default_factory=list)
    live_cam_urls: List[str] = field(default_factory=list)
    enable_live_cam: bool = False
    page_duration: int = 60
    socials: Socials = field(default_factory=Socials)
    emergency: EmergencyAlert = field(default_factory=EmergencyAlert)
    weather_config: WeatherConfig = field(default_factory=lambda: WeatherConfig(city="", lat=0.0, lon=0.0))
    custom_widgets: List[CustomWidgetDefinition] = field(default_factory=list)
    is_safe_mode: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Durable representation. Never includes isSafeMode."""
        return _without_none({
            "schoolName": self.school_name,
            "theme": self.theme.to_dict(),
            "announcements": [a.to_dict() for a in self.announcements],
            "events": [e.to_dict() for e in self.events],
            "eventCategories": [c.to_dict() for c in self.event_categories],
            "tickerItems": list(self.ticker_items),
            "liveCamUrls": list(self.live_cam_urls),
            "enableLiveCam": self.enable_live_cam,
            "pageDuration": self.page_duration,
            "pages": [p.to_dict() for p in self.pages],
            "socials": self.socials.to_dict(),
            "emergency": self.emergency.to_dict(),
            "weatherConfig": self.weather_config.to_dict(),
            "customWidgets": [w.to_dict() for w in self.custom_widgets],
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfiguration":
        """Build from an already validated and migrated mapping."""
        return cls(
            school_name=data["schoolName"],
            theme=Theme.from_dict(data["theme"]),
            pages=[Page.from_dict(p) for p in data["pages"]],
            announcements=[Announcement.from_dict(a) for a in data.get("announcements") or []],
            events=[Event.from_dict(e) for e in data.get("events") or []],
            event_categories=[CategoryDefinition.from_dict(c) for c in data.get("eventCategories") or []],
            ticker_items=list(data.get("tickerItems") or []),
            live_cam_urls=list(data.get("liveCamUrls") or []),
            enable_live_cam=bool(data.get("enableLiveCam", False)),
            page_duration=int(data.get("pageDuration", 60)),
            socials=Socials.from_dict(data.get("socials") or {}),
            emergency=EmergencyAlert.from_dict(data.get("emergency") or {}),
            weather_config=WeatherConfig.from_dict(data.get("weatherConfig") or {}),
            custom_widgets=[CustomWidgetDefinition.from_dict(w) for w in data.get("customWidgets") or []],
        )

    def find_page(self, page_id: str) -> Optional[Page]:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None

    def active_announcements(self) -> List[Announcement]:
        return [a for a in self.announcements if a.active]

    def enabled_pages(self) -> List[Page]:
        return [p for p in self.pages if p.is_enabled]


@dataclass
class LogEntry:
    """System log record shown in the admin diagnostics tab."""

    id: str
    timestamp: int  # epoch millis
    level: str
    source: str
    message: str
    stack: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            "id": self.id,
            "timestamp": self.timestamp,
            "level": self.level,
            "source": self.source,
            "message": self.message,
            "stack": self.stack,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogEntry":
        return cls(
            id=str(data.get("id", "")),
            timestamp=int(data.get("timestamp", 0)),
            level=data.get("level", "info"),
            source=data.get("source", ""),
            message=data.get("message", ""),
            stack=data.get("stack"),
        )


@dataclass
class LoginLogEntry:
    """One admin login attempt."""

    id: str
    email: str
    timestamp: int  # epoch millis
    success: bool
    reason: str
    user_agent: str = ""
    screen: Dict[str, int] = field(default_factory=lambda: {"width": 0, "height": 0})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "timestamp": self.timestamp,
            "success": self.success,
            "reason": self.reason,
            "userAgent": self.user_agent,
            "screen": dict(self.screen),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoginLogEntry":
        return cls(
            id=str(data.get("id", "")),
            email=data.get("email", ""),
            timestamp=int(data.get("timestamp", 0)),
            success=bool(data.get("success", False)),
            reason=data.get("reason", "unknown"),
            user_agent=data.get("userAgent", ""),
            screen=dict(data.get("screen") or {"width": 0, "height": 0}),
        )
