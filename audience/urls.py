from django.urls import path

from .views import (
    HasRespondedView,
    JoinSessionView,
    ParticipantListView,
    ParticipantLookupView,
    ResponseCountsView,
    SubmitResponseView,
)

urlpatterns = [
    path("sessions/<int:session_id>/join/", JoinSessionView.as_view(), name="session-join"),
    path("sessions/<int:session_id>/responses/", SubmitResponseView.as_view(), name="session-respond"),
    path("sessions/<int:session_id>/participants/", ParticipantListView.as_view(), name="session-participants"),
    path(
        "sessions/<int:session_id>/participants/<str:unique_id>/",
        ParticipantLookupView.as_view(),
        name="session-participant",
    ),
    path(
        "sessions/<int:session_id>/response-counts/",
        ResponseCountsView.as_view(),
        name="session-response-counts",
    ),
    path("questions/<int:question_id>/responded/", HasRespondedView.as_view(), name="question-responded"),
]
