from django.urls import path
from .consumers import SessionStateConsumer

# Websocket path for live session state; included in root router
websocket_urlpatterns = [
    path("ws/sessions/<str:code>/", SessionStateConsumer.as_asgi(), name="session-state"),
]
