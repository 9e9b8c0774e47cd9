from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import UUID


class _Encoder(json.JSONEncoder):
    def default(self, o: object) -> Any:
        if isinstance(o, UUID):
            return str(o)
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def serialize_event(event_type: str, payload: dict[str, Any], *, event_id: int | None = None) -> str:
    """Envelope: {"event": <type>, "id": <outbox id>, "data": <payload>}."""
    envelope = {"event": event_type, "id": event_id, "data": payload}
    return json.dumps(envelope, cls=_Encoder, ensure_ascii=False)
