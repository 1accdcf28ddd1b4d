"""
Content-app schema registry.

One entry per editor in the suite. Each entry carries a JSON-shape
descriptor and one canonical example payload. The descriptors document the
payloads; storage never enforces them. The only check applied on create is
that the app's ``required`` top-level keys are present.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..errors import ValidationFailedError


@dataclass(frozen=True)
class AppSpec:
    """Descriptor for one content app."""

    id: str
    name: str
    description: str
    schema: Dict[str, Any]
    example: Dict[str, Any]
    required: Tuple[str, ...] = ()
    markdown_import: bool = False

    def to_dict(self, include_schema: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "required": list(self.required),
            "markdown_import": self.markdown_import,
        }
        if include_schema:
            data["schema"] = self.schema
            data["example"] = self.example
        return data


def _object(properties: Dict[str, Any], required: Tuple[str, ...] = ()) -> Dict[str, Any]:
    return {"type": "object", "properties": properties, "required": list(required)}


def _array(items: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "array", "items": items}


STRING = {"type": "string"}
NUMBER = {"type": "number"}


APPS: Dict[str, AppSpec] = {}


def register(spec: AppSpec) -> AppSpec:
    APPS[spec.id] = spec
    return spec


register(
    AppSpec(
        id="notes",
        name="Notes",
        description="Free-form rich text notes",
        schema=_object({"text": STRING, "format": {"enum": ["markdown", "plain"]}}),
        example={"text": "# Standup\n- shipped uploads", "format": "markdown"},
    )
)

register(
    AppSpec(
        id="kanban",
        name="Kanban",
        description="Boards with ordered columns of cards",
        schema=_object(
            {
                "columns": _array(
                    _object(
                        {
                            "id": STRING,
                            "title": STRING,
                            "cards": _array(
                                _object(
                                    {"id": STRING, "title": STRING, "notes": STRING},
                                    ("id", "title"),
                                )
                            ),
                        },
                        ("id", "title", "cards"),
                    )
                )
            },
            ("columns",),
        ),
        example={
            "columns": [
                {"id": "todo", "title": "To do", "cards": [{"id": "c1", "title": "Draft brief"}]},
                {"id": "done", "title": "Done", "cards": []},
            ]
        },
        required=("columns",),
    )
)

register(
    AppSpec(
        id="timeline",
        name="Timeline",
        description="Dated events in chronological order",
        schema=_object(
            {
                "events": _array(
                    _object(
                        {
                            "date": STRING,
                            "title": STRING,
                            "description": STRING,
                            "icon": {"type": ["string", "null"]},
                        },
                        ("date", "title"),
                    )
                )
            },
            ("events",),
        ),
        example={
            "events": [
                {"date": "2024-01-15", "title": "Kickoff", "description": "Team formed", "icon": "🚀"},
                {"date": "2024-03", "title": "Beta", "description": "", "icon": None},
            ]
        },
        required=("events",),
        markdown_import=True,
    )
)

register(
    AppSpec(
        id="markdown",
        name="Markdown & Diagrams",
        description="Markdown documents with embedded diagram sources",
        schema=_object(
            {
                "markdown": STRING,
                "diagrams": _array(_object({"id": STRING, "kind": STRING, "source": STRING})),
            },
            ("markdown",),
        ),
        example={
            "markdown": "# Architecture\n\nSee diagram below.",
            "diagrams": [{"id": "d1", "kind": "mermaid", "source": "graph TD; A-->B"}],
        },
        required=("markdown",),
    )
)

register(
    AppSpec(
        id="slides",
        name="Slides",
        description="Slide decks with per-slide layouts",
        schema=_object(
            {
                "theme": STRING,
                "slides": _array(
                    _object(
                        {
                            "layout": {"enum": ["title", "bullets", "code", "image", "quote", "content"]},
                            "title": {"type": ["string", "null"]},
                            "body": STRING,
                        },
                        ("layout", "body"),
                    )
                ),
            },
            ("slides",),
        ),
        example={
            "theme": "midnight",
            "slides": [
                {"layout": "title", "title": "Q4 Review", "body": "Finance team"},
                {"layout": "bullets", "title": "Highlights", "body": "- Revenue up\n- Costs flat"},
            ],
        },
        required=("slides",),
        markdown_import=True,
    )
)

register(
    AppSpec(
        id="metric",
        name="Spreadsheet",
        description="Sparse grid of cells keyed by A1 references",
        schema=_object(
            {
                "cells": {"type": "object", "additionalProperties": {"type": ["string", "number"]}},
                "columns": NUMBER,
                "rows": NUMBER,
            },
            ("cells",),
        ),
        example={"cells": {"A1": "Revenue", "B1": 1200, "A2": "Costs", "B2": "=B1*0.4"}, "columns": 26, "rows": 100},
        required=("cells",),
    )
)

register(
    AppSpec(
        id="themes",
        name="Theme Designer",
        description="Custom content themes",
        schema=_object(
            {
                "name": STRING,
                "colors": {"type": "object"},
                "fonts": _object({"heading": STRING, "body": STRING, "mono": STRING}),
                "styles": {"type": "object"},
            }
        ),
        example={
            "name": "Harbor",
            "colors": {"background": {"hex": "#0b1d2a"}, "accent": "#1fb6ff"},
            "fonts": {"heading": "'Outfit', sans-serif"},
        },
    )
)


def list_apps() -> List[AppSpec]:
    return list(APPS.values())


def get_app(app_id: str) -> Optional[AppSpec]:
    return APPS.get(app_id)


def require_app(app_id: str) -> AppSpec:
    spec = APPS.get(app_id)
    if spec is None:
        raise ValidationFailedError(
            f"Unknown app '{app_id}'",
            {"field": "app", "value": app_id, "allowed": sorted(APPS)},
        )
    return spec


def validate_content(app_id: str, content: Any) -> AppSpec:
    """Check a payload against the app's required top-level keys."""
    spec = require_app(app_id)
    if not spec.required:
        return spec
    if not isinstance(content, dict):
        raise ValidationFailedError(
            f"Content for app '{app_id}' must be an object",
            {"field": "content", "required": list(spec.required)},
        )
    missing = [key for key in spec.required if key not in content]
    if missing:
        raise ValidationFailedError(
            f"Content for app '{app_id}' is missing required fields: {', '.join(missing)}",
            {"field": "content", "missing": missing},
        )
    return spec
