"""Human readable text for structured log events.

Templates live in ``event_templates.json`` next to this module, grouped as
``{domain: {action: template}}``. A missing or broken file leaves a single
``("app", "load_error")`` entry behind instead of failing the import.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}


def _flatten(grouped: object) -> dict[tuple[str, str], str]:
    if not isinstance(grouped, Mapping):
        return {}
    return {
        (domain, action): text
        for domain, actions in grouped.items()
        if isinstance(domain, str) and isinstance(actions, Mapping)
        for action, text in actions.items()
        if isinstance(action, str) and isinstance(text, str)
    }


def load_event_templates(path: Path = TEMPLATES_PATH) -> dict[tuple[str, str], str]:
    try:
        grouped = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {("app", "load_error"): f"Event templates file missing: {path.name}"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Event templates unreadable: {e}"[:200]}
    return _flatten(grouped)


def reload_event_templates() -> None:
    # Mutate in place so modules holding a reference see the new entries.
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(load_event_templates())


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "load_event_templates", "reload_event_templates"]
