"""
Tests for the text-generation adapters and newsletter import.
"""

import io
import threading

import pytest
from pypdf import PdfWriter
from unittest.mock import MagicMock

from src.signage.exceptions import OversizedDocumentError, RemoteFetchError
from src.signage.text_service import (
    FALLBACK_THEME,
    MAX_IMPORTED_ANNOUNCEMENTS,
    MAX_IMPORTED_EVENTS,
    MAX_NEWSLETTER_CHARS,
    NEWSLETTER_SCHEMA,
    THEME_SCHEMA,
    TextGenerator,
    analyze_newsletter,
    generate_theme,
    import_newsletter,
    rewrite_announcement,
)


class FakeGenerator(TextGenerator):
    """Canned responses; records prompts."""

    def __init__(self, text=None, structured=None, error=None):
        self.text = text
        self.structured = structured
        self.error = error
        self.prompts = []

    def generate_text(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text

    def generate_structured(self, prompt, schema):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.structured


class BlockingGenerator(TextGenerator):
    def __init__(self):
        self.release = threading.Event()

    def generate_structured(self, prompt, schema):
        self.release.wait(5)
        return {}


def blank_pdf(pages=1):
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestRewriteAnnouncement:
    def test_returns_polished_text(self):
        generator = FakeGenerator(text="  Join us Friday for the pep rally!  ")
        assert rewrite_announcement(generator, "pep rally fri") == "Join us Friday for the pep rally!"
        assert "pep rally fri" in generator.prompts[0]

    def test_failure_returns_draft(self):
        generator = FakeGenerator(error=RuntimeError("quota exceeded"))
        assert rewrite_announcement(generator, "pep rally fri") == "pep rally fri"

    def test_empty_output_returns_draft(self):
        assert rewrite_announcement(FakeGenerator(text=""), "draft") == "draft"


class TestGenerateTheme:
    def test_builds_theme_with_new_id(self):
        generator = MagicMock()
        generator.generate_structured.return_value = {
            "name": "Ocean", "gradientStart": "#001", "gradientEnd": "#002",
            "accentColor": "#0ff", "textColor": "#fff",
        }

        theme = generate_theme(generator, "deep sea")

        assert theme.name == "Ocean"
        assert theme.accent_color == "#0ff"
        assert theme.id
        generator.generate_structured.assert_called_once()
        assert generator.generate_structured.call_args[0][1] is THEME_SCHEMA

    def test_failure_uses_fallback(self):
        theme = generate_theme(FakeGenerator(error=RuntimeError("down")), "anything")
        assert theme.name == FALLBACK_THEME["name"]
        assert theme.gradient_start == "#000000"

    def test_non_object_uses_fallback(self):
        assert generate_theme(FakeGenerator(structured="oops"), "x").name == "Error Fallback"

    def test_ids_differ_between_calls(self):
        generator = FakeGenerator(error=RuntimeError("down"))
        assert generate_theme(generator, "a").id != generate_theme(generator, "a").id


class TestAnalyzeNewsletter:
    def test_truncates_text(self):
        generator = FakeGenerator(structured={})
        analyze_newsletter(generator, "x" * (MAX_NEWSLETTER_CHARS + 500))
        assert generator.prompts[0].count("x") == MAX_NEWSLETTER_CHARS

    def test_caps_results(self):
        generator = FakeGenerator(structured={
            "events": [{"title": str(n)} for n in range(30)],
            "announcements": [{"title": str(n)} for n in range(30)],
        })
        result = analyze_newsletter(generator, "text")
        assert len(result["events"]) == MAX_IMPORTED_EVENTS
        assert len(result["announcements"]) == MAX_IMPORTED_ANNOUNCEMENTS

    def test_accepts_json_string(self):
        generator = FakeGenerator(structured='{"events": [{"title": "Game"}]}')
        assert analyze_newsletter(generator, "t")["events"] == [{"title": "Game"}]

    def test_schema_passed(self):
        generator = MagicMock()
        generator.generate_structured.return_value = {}
        analyze_newsletter(generator, "t")
        assert generator.generate_structured.call_args[0][1] is NEWSLETTER_SCHEMA

    def test_timeout(self):
        generator = BlockingGenerator()
        try:
            with pytest.raises(RemoteFetchError) as exc_info:
                analyze_newsletter(generator, "t", timeout=0.1)
            assert exc_info.value.kind == RemoteFetchError.TIMEOUT
        finally:
            generator.release.set()

    def test_service_error_propagates(self):
        with pytest.raises(RuntimeError):
            analyze_newsletter(FakeGenerator(error=RuntimeError("boom")), "t")


class TestImportNewsletter:
    def test_converts_entities(self):
        generator = FakeGenerator(structured={
            "events": [
                {"title": "Homecoming", "date": "2026-10-30", "category": "Sports"},
                {"title": "Bake sale", "category": "Fundraiser"},
            ],
            "announcements": [
                {"title": "Picture day", "content": "Wear blue", "priority": "high"},
                {"title": "Lost & found", "priority": "urgent"},
                "not a dict",
            ],
        })

        content = import_newsletter(generator, blank_pdf())

        assert [e.title for e in content.events] == ["Homecoming", "Bake sale"]
        assert content.events[0].category == "Sports"
        assert content.events[1].category == "General"
        assert len(content.announcements) == 2
        assert content.announcements[0].priority == "high"
        assert content.announcements[1].priority == "normal"
        assert all(a.active for a in content.announcements)
        assert len({e.id for e in content.events}) == 2

    def test_custom_categories(self):
        generator = FakeGenerator(structured={"events": [{"title": "Chess", "category": "Clubs"}]})
        content = import_newsletter(generator, blank_pdf(), categories=["Clubs"])
        assert content.events[0].category == "Clubs"

    def test_oversized_document_never_reaches_service(self):
        generator = FakeGenerator(structured={})
        with pytest.raises(OversizedDocumentError):
            import_newsletter(generator, blank_pdf(4), max_pages=3)
        assert generator.prompts == []
