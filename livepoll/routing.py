"""
Project-level Channels routing configuration.

This module collects the URL routes for all WebSocket connections.
"""
from polling.routing import websocket_urlpatterns as polling_ws

websocket_urlpatterns = [
    *polling_ws,
]
