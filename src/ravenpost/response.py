from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from .errors import ProtocolError


class EventResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: StrictStr | None = None


def decode_event_id(text: str | None) -> str | None:
    """Pull the event id out of a store response.

    Empty bodies mean "no content" and return None. Anything else must be a JSON
    object with a string `id`, otherwise ProtocolError is raised.
    """
    if text is None or not text.strip():
        return None
    try:
        response = EventResponse.model_validate_json(text)
    except ValidationError as e:
        raise ProtocolError(f"Unreadable store response: {e.errors()[0]['msg']}") from e
    if response.id is None:
        raise ProtocolError("Store response has no 'id' field")
    return response.id
