import pytest
from channels.db import database_sync_to_async
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator

from polling import services
from polling.routing import websocket_urlpatterns
from polling.timers import set_active_question

application = URLRouter(websocket_urlpatterns)


@database_sync_to_async
def _session_with_question():
    from polling import questions as question_ops

    session = services.create_session("Live demo", "p-ws")
    question = question_ops.create_question(
        session.id, {"title": "Ready?", "type": "multiple_choice", "options": ["Yes", "No"], "time_limit": 20}
    )
    return session, question


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
async def test_snapshot_then_live_updates():
    session, question = await _session_with_question()

    communicator = WebsocketCommunicator(application, f"/ws/sessions/{session.code.lower()}/")
    connected, _ = await communicator.connect()
    assert connected

    snapshot = await communicator.receive_json_from()
    assert snapshot["type"] == "session.state"
    assert snapshot["session"]["id"] == session.id
    assert snapshot["session"]["active_question_id"] is None

    await database_sync_to_async(services.start_session)(session.id)
    update = await communicator.receive_json_from()
    assert update["session"]["status"] == "active"

    await database_sync_to_async(set_active_question)(session.id, question.id)
    update = await communicator.receive_json_from()
    assert update["session"]["active_question_id"] == question.id
    assert update["session"]["question_started_at"] is not None
    assert "server_time" in update["session"]

    await communicator.disconnect()


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
async def test_deleted_session_is_announced():
    session, _ = await _session_with_question()
    communicator = WebsocketCommunicator(application, f"/ws/sessions/{session.code}/")
    connected, _ = await communicator.connect()
    assert connected
    await communicator.receive_json_from()

    await database_sync_to_async(services.delete_session)(session.id)
    message = await communicator.receive_json_from()
    assert message == {"type": "session.deleted", "session_id": session.id}
    await communicator.disconnect()


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
async def test_channel_is_read_only():
    session, _ = await _session_with_question()
    communicator = WebsocketCommunicator(application, f"/ws/sessions/{session.code}/")
    await communicator.connect()
    await communicator.receive_json_from()

    await communicator.send_json_to({"status": "ended"})
    reply = await communicator.receive_json_from()
    assert reply["error"] == "read_only"
    await communicator.disconnect()


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
async def test_unknown_code_is_refused():
    communicator = WebsocketCommunicator(application, "/ws/sessions/NOPE99/")
    connected, close_code = await communicator.connect()
    assert not connected
    assert close_code == 4404
