"""Parsing of user-preference entry content.

Preference entries are either a JSON object (merged key by key) or the
"User preference: <key> = <json value>" form written by
MemoryManager.store_user_preference. Anything else is malformed and the
caller decides whether to skip it.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any

from agentmem.memory.errors import MalformedDataError

PREFERENCE_PREFIX = "User preference:"

_KEY_VALUE_PATTERN = re.compile(
    rf"^{re.escape(PREFERENCE_PREFIX)}\s*(?P<key>[^=]+?)\s*=\s*(?P<value>.*)$",
    re.DOTALL,
)


@dataclass(slots=True)
class PreferenceParse:
    """Result of parsing one preference entry."""

    value: dict[str, Any] = field(default_factory=dict)
    error: MalformedDataError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def format_preference(key: str, value: Any) -> str:
    """Render a preference in the form parse_preference understands."""
    return f"{PREFERENCE_PREFIX} {key} = {json.dumps(value, default=str)}"


def parse_preference(content: str) -> PreferenceParse:
    """Parse preference content without raising."""
    match = _KEY_VALUE_PATTERN.match(content.strip())
    if match:
        try:
            value = json.loads(match.group("value"))
        except ValueError:
            return PreferenceParse(
                error=MalformedDataError(f"Preference value is not JSON: {match.group('key')}")
            )
        return PreferenceParse(value={match.group("key"): value})

    try:
        parsed = json.loads(content)
    except ValueError:
        return PreferenceParse(error=MalformedDataError("Preference content is not JSON"))

    if not isinstance(parsed, dict):
        return PreferenceParse(
            error=MalformedDataError(
                f"Preference content is JSON {type(parsed).__name__}, expected object"
            )
        )
    return PreferenceParse(value=parsed)
