"""
WebSocket consumer pushing live session state to audience and presenter
screens.

    ws://.../ws/sessions/<code>/

On connect the client receives a snapshot; afterwards every write to the
session row is broadcast by `polling.signals`:

<<< {"type": "session.state", "session": {...}}
<<< {"type": "session.deleted", "session_id": 12}

The countdown is not pushed; clients derive it from
`session.question_started_at`, `session.server_time` and the question's
`time_limit`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .codes import normalize_code
from .models import Session

log = logging.getLogger(__name__)


def session_group(session_id: int) -> str:
    return f"session_{session_id}"


@database_sync_to_async
def _snapshot_for_code(code: str) -> Optional[Dict[str, Any]]:
    from .serializers import SessionSerializer

    session = Session.objects.filter(code=normalize_code(code)).first()
    if session is None:
        return None
    return SessionSerializer(session).data


class SessionStateConsumer(AsyncJsonWebsocketConsumer):
    group_name: Optional[str] = None

    async def connect(self) -> None:
        code = self.scope["url_route"]["kwargs"]["code"]
        snapshot = await _snapshot_for_code(code)
        if snapshot is None:
            await self.close(code=4404)  # Not found
            return

        self.group_name = session_group(snapshot["id"])
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send_json({"type": "session.state", "session": snapshot})
        log.debug("WS joined %s", self.group_name)

    async def disconnect(self, code: int) -> None:
        if self.group_name:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def receive_json(self, content: Dict[str, Any], **kwargs: Any) -> None:
        # Read-only channel; writes go through the REST API.
        await self.send_json({"type": "error", "error": "read_only", "detail": "This channel is read-only."})

    async def session_state(self, event: Dict[str, Any]) -> None:
        await self.send_json(event.get("payload", {}))

    async def session_deleted(self, event: Dict[str, Any]) -> None:
        await self.send_json(event.get("payload", {}))
