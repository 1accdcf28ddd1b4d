"""
Markdown to structured content for the slides and timeline apps.

Slides grammar:
    A deck is split on separator lines made of three or more dashes
    (``---``). Separators inside fenced code blocks do not split. Empty
    segments are dropped. Each segment gets a layout:

        code     contains a fenced block
        image    contains ``![alt](src)``
        quote    every non-blank line starts with ``>``
        title    a single ``#`` heading, optionally followed by one plain line
        bullets  contains list items (``-``, ``*``, ``+`` or ``1.``)
        content  anything else

    The first heading becomes the slide title and is removed from the body.

Timeline grammar:
    Events start at heading lines of the form ``## <date> <sep> <title>``
    where date is ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD`` and sep is optional
    (``-``, ``–``, ``—``, ``:`` or ``|``). A leading emoji in the title is
    moved to ``icon``. Following lines, including headings that do not match,
    form the description. Lines before the first event are dropped.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from ..errors import ValidationFailedError

SLIDE_SEPARATOR = re.compile(r"^\s*-{3,}\s*$")
FENCE = re.compile(r"^\s*(```|~~~)")
HEADING = re.compile(r"^\s*(#{1,6})\s+(.+?)\s*#*\s*$")
IMAGE = re.compile(r"!\[[^\]]*\]\([^)]+\)")
BULLET = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")

EVENT_HEADING = re.compile(
    r"^\s*#{1,6}\s+(?P<date>\d{4}(?:-\d{2}){0,2})\b\s*(?:[-–—:|]\s*)?(?P<title>.*?)\s*$"
)
ICON_PREFIX = re.compile(
    r"^(?P<icon>(?:[\U0001F000-\U0001FAFF\U00002600-\U000027BF\U00002B00-\U00002BFF]"
    r"[\U0000FE0F\U0000200D\U0001F3FB-\U0001F3FF]*)+)\s*(?P<rest>.*)$"
)


def split_slides(markdown: str) -> List[str]:
    """Split a deck into raw slide segments."""
    segments: List[str] = []
    current: List[str] = []
    in_fence = False

    for line in markdown.splitlines():
        if FENCE.match(line):
            in_fence = not in_fence
        if not in_fence and SLIDE_SEPARATOR.match(line):
            segments.append("\n".join(current))
            current = []
            continue
        current.append(line)
    segments.append("\n".join(current))

    return [s.strip("\n") for s in segments if s.strip()]


def classify_slide(segment: str) -> str:
    """Pick a layout for one slide segment."""
    lines = [line for line in segment.splitlines() if line.strip()]

    if any(FENCE.match(line) for line in lines):
        return "code"
    if IMAGE.search(segment):
        return "image"
    if lines and all(line.lstrip().startswith(">") for line in lines):
        return "quote"

    first = HEADING.match(lines[0]) if lines else None
    if first and len(first.group(1)) == 1:
        rest = lines[1:]
        if len(rest) <= 1 and not any(HEADING.match(r) or BULLET.match(r) for r in rest):
            return "title"

    if any(BULLET.match(line) for line in lines):
        return "bullets"
    return "content"


def parse_slide(segment: str) -> Dict[str, Any]:
    layout = classify_slide(segment)
    title: Optional[str] = None
    body_lines: List[str] = []

    for line in segment.splitlines():
        match = HEADING.match(line)
        if title is None and match and layout != "quote":
            title = match.group(2)
            continue
        body_lines.append(line)

    return {
        "layout": layout,
        "title": title,
        "body": "\n".join(body_lines).strip(),
    }


def markdown_to_slides(markdown: str) -> Dict[str, Any]:
    return {"slides": [parse_slide(segment) for segment in split_slides(markdown)]}


def extract_icon(title: str) -> tuple:
    """Split a leading emoji off a title. Returns (icon or None, title)."""
    match = ICON_PREFIX.match(title)
    if not match:
        return None, title
    return match.group("icon"), match.group("rest").strip()


def markdown_to_timeline(markdown: str) -> Dict[str, Any]:
    events: List[Dict[str, Any]] = []
    description: List[str] = []

    def close_event() -> None:
        if events:
            events[-1]["description"] = "\n".join(description).strip()

    for line in markdown.splitlines():
        match = EVENT_HEADING.match(line)
        if match:
            close_event()
            description = []
            icon, title = extract_icon(match.group("title"))
            events.append(
                {
                    "date": match.group("date"),
                    "title": title,
                    "description": "",
                    "icon": icon,
                }
            )
        elif events:
            description.append(line)
        # Lines before the first dated heading are dropped.

    close_event()
    return {"events": events}


CONVERTERS = {
    "slides": markdown_to_slides,
    "timeline": markdown_to_timeline,
}


def markdown_to_content(app: str, markdown: str) -> Dict[str, Any]:
    """Convert markdown into the structured content of ``app``."""
    converter = CONVERTERS.get(app)
    if converter is None:
        raise ValidationFailedError(
            f"App '{app}' does not support markdown import",
            {"field": "app", "value": app, "allowed": sorted(CONVERTERS)},
        )
    return converter(markdown)
