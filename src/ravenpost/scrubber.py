import json
import re
from typing import Any, Iterable, Protocol

MASK = "********"

DEFAULT_KEYS = ("password", "passwd", "secret", "api_key", "token")

# 13-19 digits, optionally grouped by spaces or dashes
CREDIT_CARD_RE = re.compile(r"\b(?:\d[ -]?){12,18}\d\b")


class LogScrubber(Protocol):
    def scrub(self, text: str) -> str: ...


class PatternScrubber:
    """Masks credit card numbers and the values of sensitive JSON keys.

    JSON input is scrubbed structurally: any value under a sensitive key is
    replaced, whatever its type, and patterns only apply inside strings, so the
    output is still valid JSON. Text that is not JSON gets the patterns only.
    """

    def __init__(self, keys: Iterable[str] = DEFAULT_KEYS, patterns: Iterable[str] = ()):
        self._keys = tuple(k.lower() for k in keys)
        self._patterns = [CREDIT_CARD_RE, *(re.compile(p) for p in patterns)]

    def scrub(self, text: str) -> str:
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            return self._scrub_string(text)
        return json.dumps(self._scrub_value(data), separators=(",", ":"), ensure_ascii=False)

    def _is_sensitive(self, key: str) -> bool:
        key = key.lower()
        return any(k in key for k in self._keys)

    def _scrub_value(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                k: MASK if self._is_sensitive(k) else self._scrub_value(v)
                for k, v in value.items()
            }
        if isinstance(value, list):
            return [self._scrub_value(v) for v in value]
        if isinstance(value, str):
            return self._scrub_string(value)
        return value

    def _scrub_string(self, text: str) -> str:
        for pattern in self._patterns:
            text = pattern.sub(MASK, text)
        return text
