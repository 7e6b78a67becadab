"""Plant list rendering (text and JSON).

This module is renderer-only. All query logic lives in api/plants_api.py.
"""

import json

from ..plants.coordinator import STATUS_FAILED, FetchState

LOADING_TEXT = "Loading plants..."
EMPTY_TEXT = "No plants found matching the criteria."


def render_text(state: FetchState) -> str:
    """Render a fetch state the way the list view shows it."""
    if state.is_loading:
        return LOADING_TEXT
    if state.status == STATUS_FAILED:
        return state.error or ""

    lines = [state.header_label or "", ""]
    if not state.records:
        lines.append(EMPTY_TEXT)
        return "\n".join(lines)

    for record in state.records:
        lines.append(f"🌱 {record.name} 🌱")
        lines.append(f"Type: {record.type}")
        lines.append(f"Location: {record.location}")
        lines.append(f"Time Added: {record.date_added_display}")
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def render_json(state: FetchState) -> str:
    """Render a fetch state as JSON."""
    payload = {
        "status": state.status,
        "header": state.header_label,
        "error": state.error,
        "count": len(state.records),
        "plants": [record.model_dump(mode="json") for record in state.records],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)
