# polling/signals.py
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .consumers import session_group
from .models import Session
from .serializers import SessionSerializer


def _broadcast(session_id: int, message: dict) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return  # Channels not configured; safely no-op
    async_to_sync(channel_layer.group_send)(session_group(session_id), message)


@receiver(post_save, sender=Session)
def push_session_state(sender, instance: Session, **kwargs):
    """Broadcast the session's current state to everyone watching it."""
    payload = {"type": "session.state", "session": SessionSerializer(instance).data}
    _broadcast(instance.id, {"type": "session.state", "payload": payload})


@receiver(post_delete, sender=Session)
def push_session_deleted(sender, instance: Session, **kwargs):
    payload = {"type": "session.deleted", "session_id": instance.id}
    _broadcast(instance.id, {"type": "session.deleted", "payload": payload})
