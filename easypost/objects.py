"""Events, webhook payloads and decoding of API objects by their type name."""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .models import (
    Address,
    APIKey,
    Batch,
    CarrierAccount,
    CarrierType,
    CustomsInfo,
    CustomsItem,
    Insurance,
    Model,
)


@dataclass
class Event(Model):
    """A change to an API object.

    ``result`` holds the object the event is about, decoded to its model
    class when its type is known, and ``None`` when the event carries none.
    """

    id: str = ""
    user_id: str = ""
    object: str = ""
    mode: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    description: str = ""
    previous_attributes: dict[str, Any] = field(default_factory=dict)
    result: Any = None
    status: str = ""
    pending_urls: list[str] = field(default_factory=list)
    completed_urls: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        """Build an event, decoding its result by the result's object type."""
        if not isinstance(data, Mapping):
            raise TypeError("Event must be decoded from a JSON object")
        event = super().from_dict({key: value for key, value in data.items() if key != "result"})
        event.result = _decode_value(data.get("result"))
        return event


@dataclass
class EventPayload(Model):
    """The record of one webhook call.

    ``request_body`` is decoded to an object when possible (after undoing a
    base64 encoding, if any); otherwise it keeps the body text.
    """

    id: str = ""
    object: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    request_url: str = ""
    request_headers: dict[str, str] = field(default_factory=dict)
    request_body: Any = None
    response_headers: dict[str, str] = field(default_factory=dict)
    response_body: str = ""
    response_code: int = 0
    total_time: int = 0

    @classmethod
    def from_dict(cls, data):
        """Build a payload, decoding the request body where it can be."""
        if not isinstance(data, Mapping):
            raise TypeError("EventPayload must be decoded from a JSON object")
        raw = data.get("request_body")
        if raw is not None and not isinstance(raw, str):
            raise TypeError("field 'request_body' must be a string")
        payload = super().from_dict(
            {key: value for key, value in data.items() if key != "request_body"}
        )
        text = raw or ""
        try:
            text = base64.b64decode(text, validate=True).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError):
            pass
        try:
            payload.request_body = decode_object(text)
        except (ValueError, TypeError):
            payload.request_body = text
        return payload


@dataclass
class ListEventsResult(Model):
    """One page of events; has_more tells whether more pages follow."""

    events: list[Event] = field(default_factory=list)
    has_more: bool = False


_OBJECT_TYPES: dict[str, type[Model]] = {
    "Address": Address,
    "ApiKey": APIKey,
    "Batch": Batch,
    "CarrierAccount": CarrierAccount,
    "CarrierType": CarrierType,
    "CustomsInfo": CustomsInfo,
    "CustomsItem": CustomsItem,
    "Event": Event,
    "Insurance": Insurance,
    "Payload": EventPayload,
}


def _decode_value(value: Any) -> Any:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise TypeError("an API object must be a JSON object")
    kind = value.get("object")
    if kind is None:
        kind = ""
    if not isinstance(kind, str):
        raise TypeError("field 'object' must be a string")
    model = _OBJECT_TYPES.get(kind)
    if model is None:
        return value
    return model.from_dict(value)


def decode_object(data):
    """Decode an API object, picking its class from its ``object`` key.

    ``data`` is JSON text (str or bytes) or an already decoded value. Empty
    text gives ``None``. Objects of an unknown type come back as plain dicts.
    Raises ValueError for malformed JSON and TypeError for JSON that is not
    an object.
    """
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    if isinstance(data, str):
        if not data:
            return None
        data = json.loads(data)
    return _decode_value(data)