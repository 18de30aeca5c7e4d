"""
Tests for the configuration data model.
"""

from src.signage.defaults import default_configuration, default_data
from src.signage.models import (
    AppConfiguration,
    Announcement,
    EmergencyAlert,
    GridItemConfig,
    LoginLogEntry,
    Page,
    Theme,
    WidgetConfig,
    generate_id,
)


class TestEntities:
    """Tests for camelCase mapping of individual entities."""

    def test_theme_uses_camel_case(self):
        theme = Theme(id="t", name="Dark", gradient_start="#000", gradient_end="#111",
                      accent_color="#f00", text_color="#fff")
        data = theme.to_dict()
        assert data["gradientStart"] == "#000"
        assert "logoUrl" not in data
        assert Theme.from_dict(data) == theme

    def test_announcement_defaults(self):
        announcement = Announcement.from_dict({"title": "Hi", "content": "There"})
        assert announcement.id
        assert announcement.type == "text"
        assert announcement.active is True
        assert announcement.priority == "normal"

    def test_grid_page(self):
        page = Page(
            id="g", title="Grid", type="grid",
            layout=[GridItemConfig(i="w", x=1, y=2, w=3, h=4)],
            widgets={"w": WidgetConfig(id="w", type="clock", settings={"format": "24h"})},
        )
        data = page.to_dict()
        assert data["layout"] == [{"i": "w", "x": 1, "y": 2, "w": 3, "h": 4}]
        assert data["widgets"]["w"]["settings"] == {"format": "24h"}
        assert Page.from_dict(data) == page

    def test_page_without_type_is_standard(self):
        assert Page.from_dict({"id": "p", "title": "t"}).type == "standard"

    def test_page_enabled_by_default(self):
        assert Page(id="p", title="t").is_enabled
        assert not Page(id="p", title="t", enabled=False).is_enabled

    def test_emergency_omits_missing_audio(self):
        assert "audioData" not in EmergencyAlert().to_dict()

    def test_login_entry_screen_default(self):
        entry = LoginLogEntry.from_dict({"email": "a@b.c"})
        assert entry.screen == {"width": 0, "height": 0}
        assert entry.reason == "unknown"

    def test_generate_id_unique(self):
        assert len({generate_id() for _ in range(100)}) == 100


class TestAppConfiguration:
    """Tests for the configuration root."""

    def test_defaults_round_trip(self):
        config = default_configuration()
        assert AppConfiguration.from_dict(config.to_dict()) == config

    def test_default_data_builds(self):
        config = AppConfiguration.from_dict(default_data())
        assert config.school_name == "Nova Academy"
        assert config.pages

    def test_weather_location_always_serialized(self):
        config = AppConfiguration(school_name="s", theme=default_configuration().theme, pages=[])
        assert config.to_dict()["weatherConfig"] == {"city": "", "lat": 0.0, "lon": 0.0}
        assert AppConfiguration.from_dict(config.to_dict()) == config

    def test_safe_mode_never_serialized(self):
        config = default_configuration(safe_mode=True)
        assert config.is_safe_mode is True
        assert "isSafeMode" not in config.to_dict()

    def test_default_data_is_a_fresh_copy(self):
        first = default_data()
        first["tickerItems"].append("changed")
        assert "changed" not in default_data()["tickerItems"]

    def test_helpers(self):
        config = default_configuration()
        config.pages = [Page(id="a", title="A"), Page(id="b", title="B", enabled=False)]
        config.announcements = [
            Announcement(id="1", title="t", content="c"),
            Announcement(id="2", title="t", content="c", active=False),
        ]

        assert config.find_page("b").title == "B"
        assert config.find_page("zzz") is None
        assert [p.id for p in config.enabled_pages()] == ["a"]
        assert [a.id for a in config.active_announcements()] == ["1"]
