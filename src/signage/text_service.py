"""
Adapters over an AI text-generation service.

The service itself is an external collaborator behind TextGenerator. These
helpers build the prompts and apply the fallbacks the admin editor relies on.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from src.common.logger import setup_logger
from .deadline import call_with_deadline
from .document_import import MAX_PAGES, DocumentSource, extract_text
from .models import Announcement, Event, Theme, generate_id

logger = setup_logger(__name__)

MAX_NEWSLETTER_CHARS = 12000
MAX_IMPORTED_EVENTS = 20
MAX_IMPORTED_ANNOUNCEMENTS = 15
PRIORITIES = ("low", "normal", "high")

THEME_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "gradientStart": {"type": "string"},
        "gradientEnd": {"type": "string"},
        "accentColor": {"type": "string"},
        "textColor": {"type": "string"},
    },
}

NEWSLETTER_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "events": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "time": {"type": "string"},
                    "location": {"type": "string"},
                    "date": {"type": "string"},
                    "category": {"type": "string"},
                },
            },
        },
        "announcements": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "content": {"type": "string"},
                    "priority": {"type": "string"},
                },
            },
        },
    },
}

FALLBACK_THEME = {
    "name": "Error Fallback",
    "gradientStart": "#000000",
    "gradientEnd": "#333333",
    "accentColor": "#ffffff",
    "textColor": "#ffffff",
}


class TextGenerator:
    """Interface to a text-generation service. Both calls may be slow or fail."""

    def generate_text(self, prompt: str) -> str:
        raise NotImplementedError

    def generate_structured(self, prompt: str, schema: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass
class ImportedContent:
    """Entities extracted from a newsletter, not yet saved."""

    announcements: List[Announcement] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)


def rewrite_announcement(generator: TextGenerator, draft: str) -> str:
    """Polish announcement copy. Returns the draft unchanged if the service fails."""
    prompt = (
        "Rewrite the following raw announcement text to be professional yet engaging "
        "for a digital signage display. Keep it concise (under 25 words). "
        f'Raw Text: "{draft}"'
    )
    try:
        text = generator.generate_text(prompt)
    except Exception as e:
        logger.error("Announcement rewrite failed: %s", e)
        return draft
    return (text or "").strip() or draft


def generate_theme(generator: TextGenerator, description: str) -> Theme:
    """Synthesize a dark, high-contrast theme from a description."""
    prompt = (
        "Create a UI color theme for a digital signage display based on this "
        f'description: "{description}". The theme should be dark-mode (high contrast). '
        "Return JSON with fields: name, gradientStart, gradientEnd, accentColor, textColor."
    )
    try:
        result = generator.generate_structured(prompt, THEME_SCHEMA)
        if not isinstance(result, dict):
            raise ValueError(f"expected an object, got {type(result).__name__}")
    except Exception as e:
        logger.error("Theme generation failed: %s", e)
        result = FALLBACK_THEME

    return Theme.from_dict(dict(result, id=generate_id()))


def analyze_newsletter(
    generator: TextGenerator,
    text: str,
    timeout: Optional[float] = None,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Extract events and announcements from newsletter text.

    Args:
        generator: Text service
        text: Raw document text (truncated before sending)
        timeout: Seconds to wait for the service, None to wait indefinitely

    Returns:
        {"events": [...], "announcements": [...]} with each list capped

    Raises:
        RemoteFetchError: On timeout
        Exception: Whatever the service raises
    """
    prompt = (
        "Extract EVENTS and ANNOUNCEMENTS from the following text.\n"
        "1. For EVENTS: Look for dates, times, and locations. Format date as ISO string. "
        "Category: Academic, Sports, Arts, General.\n"
        "2. For ANNOUNCEMENTS: Create a title and short summary (under 30 words).\n"
        "Return JSON with 'events' and 'announcements'.\n"
        f"TEXT: {text[:MAX_NEWSLETTER_CHARS]}"
    )
    result = call_with_deadline(
        generator.generate_structured, timeout, prompt, NEWSLETTER_SCHEMA,
        description="Text service",
    )
    if isinstance(result, str):
        result = json.loads(result or "{}")
    result = result or {}

    return {
        "events": list(result.get("events") or [])[:MAX_IMPORTED_EVENTS],
        "announcements": list(result.get("announcements") or [])[:MAX_IMPORTED_ANNOUNCEMENTS],
    }


def _to_event(raw: Dict[str, Any], categories: Iterable[str]) -> Event:
    category = raw.get("category") or "General"
    if category not in categories:
        category = "General"
    return Event(
        id=generate_id(),
        title=raw.get("title") or "Untitled Event",
        time=raw.get("time") or "",
        location=raw.get("location") or "",
        date=raw.get("date") or "",
        category=category,
    )


def _to_announcement(raw: Dict[str, Any]) -> Announcement:
    priority = raw.get("priority")
    return Announcement(
        id=generate_id(),
        type="text",
        title=raw.get("title") or "Announcement",
        content=raw.get("content") or "",
        active=True,
        priority=priority if priority in PRIORITIES else "normal",
    )


def import_newsletter(
    generator: TextGenerator,
    source: DocumentSource,
    categories: Iterable[str] = ("Academic", "Sports", "Arts", "General"),
    max_pages: int = MAX_PAGES,
    timeout: Optional[float] = None,
) -> ImportedContent:
    """
    Turn a newsletter PDF into new events and announcements.

    Entities get fresh ids. Nothing is saved; the caller reviews and merges.

    Raises:
        OversizedDocumentError: If the PDF exceeds max_pages
        DocumentExtractionError: If the PDF cannot be read
    """
    text = extract_text(source, max_pages=max_pages)
    extracted = analyze_newsletter(generator, text, timeout=timeout)
    known = set(categories) | {"General"}

    content = ImportedContent(
        announcements=[_to_announcement(a) for a in extracted["announcements"] if isinstance(a, dict)],
        events=[_to_event(e, known) for e in extracted["events"] if isinstance(e, dict)],
    )
    logger.info(
        "Newsletter import found %d events and %d announcements",
        len(content.events), len(content.announcements),
    )
    return content
