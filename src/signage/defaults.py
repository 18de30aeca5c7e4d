"""
Factory default configuration.
Used on first boot and as the safe-mode fallback when stored data is corrupt.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from .models import AppConfiguration

DEFAULT_THEME: Dict[str, Any] = {
    "id": "default",
    "name": "Midnight Blue",
    "gradientStart": "#000000",
    "gradientEnd": "#1e1b4b",
    "accentColor": "#3b82f6",
    "textColor": "#ffffff",
    "logoUrl": "",
}

DEFAULT_TICKER_ITEMS = [
    "REMINDER: Early dismissal this Friday at 1:00 PM.",
    "Report cards will be distributed next Monday.",
    "Yearbook sales end on May 30th!",
]

DEFAULT_LIVE_CAM_URLS = [
    "https://webcams.nyctmc.org/api/cameras/4c47eda8-a4a1-4e40-baea-578e0a99e1d8/image",
    "https://webcams.nyctmc.org/api/cameras/9ca4e591-4ac8-471c-8e76-4710b52e6f9b/image",
    "https://webcams.nyctmc.org/api/cameras/a01a8c98-d314-4eb4-bd7c-4a4f80d71c4b/image",
]

DEFAULT_EVENT_CATEGORIES = [
    {"id": "cat-1", "name": "Academic", "icon": "BookOpen"},
    {"id": "cat-2", "name": "Sports", "icon": "Trophy"},
    {"id": "cat-3", "name": "Arts", "icon": "Palette"},
    {"id": "cat-4", "name": "General", "icon": "Users"},
]

DEFAULT_PAGES = [
    {
        "id": "default-page",
        "title": "Core Values",
        "type": "standard",
        "content": (
            "## Our Mission\n\n"
            "* **Excellence**: We strive for the highest quality in everything we do.\n"
            "* **Integrity**: We act with honesty and strong moral principles.\n"
            "* **Community**: We foster a supportive and inclusive environment.\n\n"
            "Visit our website **www.novaacademy.edu** for more information."
        ),
        "imageUrl": "https://images.unsplash.com/photo-1513364776144-60967b0f800f?q=80&w=2071&auto=format&fit=crop",
    }
]

DEFAULT_SOCIALS = {
    "phone": "(555) 123-4567",
    "website": "novaacademy.edu",
    "instagram": "@NovaAcademy",
    "twitter": "@NovaTweets",
}

DEFAULT_EMERGENCY = {
    "active": False,
    "message": "EMERGENCY ALERT: PLEASE PROCEED TO THE NEAREST EXIT CALMLY.",
    "timestamp": 0,
    "includeSiren": False,
}

DEFAULT_WEATHER_CONFIG = {
    "city": "Far Rockaway",
    "lat": 40.6090,
    "lon": -73.7630,
}

DEFAULT_PAGE_DURATION = 60


def default_data() -> Dict[str, Any]:
    """Factory defaults in their persisted (camelCase) shape. A new dict on every call."""
    today = datetime.now(timezone.utc).isoformat()
    return {
        "schoolName": "Nova Academy",
        "theme": dict(DEFAULT_THEME),
        "announcements": [
            {
                "id": "1",
                "type": "text",
                "title": "Science Fair Registration",
                "content": (
                    "Registration for the annual Science Fair closes this Friday. "
                    "Please visit the main office to sign up your team!"
                ),
                "active": True,
                "priority": "high",
            },
            {
                "id": "2",
                "type": "image",
                "title": "Student Art Showcase",
                "content": "Join us in the main hall.",
                "imageUrl": "https://images.unsplash.com/photo-1544531586-fde5298cdd40?q=80&w=2070&auto=format&fit=crop",
                "active": True,
                "priority": "normal",
            },
        ],
        "events": [
            {"id": "1", "title": "Parent Teacher Conf", "time": "16:00", "location": "Auditorium",
             "date": today, "category": "Academic"},
            {"id": "2", "title": "Basketball Finals", "time": "15:30", "location": "Gym",
             "date": today, "category": "Sports"},
            {"id": "3", "title": "Jazz Band", "time": "12:00", "location": "Music Room",
             "date": today, "category": "Arts"},
        ],
        "eventCategories": [dict(c) for c in DEFAULT_EVENT_CATEGORIES],
        "tickerItems": list(DEFAULT_TICKER_ITEMS),
        "liveCamUrls": list(DEFAULT_LIVE_CAM_URLS),
        "enableLiveCam": True,
        "pageDuration": DEFAULT_PAGE_DURATION,
        "pages": [dict(p) for p in DEFAULT_PAGES],
        "socials": dict(DEFAULT_SOCIALS),
        "emergency": dict(DEFAULT_EMERGENCY),
        "weatherConfig": dict(DEFAULT_WEATHER_CONFIG),
        "customWidgets": [],
    }


def default_configuration(safe_mode: bool = False) -> AppConfiguration:
    """
    Build the factory default configuration.

    Args:
        safe_mode: Value for the volatile is_safe_mode flag

    Returns:
        A fresh AppConfiguration that callers may mutate freely
    """
    config = AppConfiguration.from_dict(default_data())
    config.is_safe_mode = safe_mode
    return config
